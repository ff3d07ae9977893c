"""
=============================================================================
REQUEST HANDLERS
=============================================================================

A handler takes a parsed HTTPRequest and returns an HTTPResponse, or
raises HTTPError for the server to turn into an error response.

    from simplehttp.handlers import StaticFileHandler

    static = StaticFileHandler(config)
    response = static.handle(request)

=============================================================================
"""

from .static import StaticFileHandler

__all__ = [
    "StaticFileHandler",
]
