"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Everything that knows what HTTP/1.0 looks like on the wire:

    bytes ──► RequestParser ──► HTTPRequest
                                    │
                                (handler)
                                    │
    bytes ◄── HTTPResponse.write ◄──┴── HTTPResponse / HTTPError.to_response()

    request.py       - HTTPMethod, HTTPRequest, RequestParser
    response.py      - HTTPResponse and the wire serializer
    status_codes.py  - HTTPStatus, the closed status registry
    errors.py        - HTTPError and its four kinds

Key points:
- Lines end with CRLF (\r\n); a bare \n is accepted on input
- Headers and body are separated by an empty line
- Body length comes from Content-Length; responses end at connection close

=============================================================================
"""

from .request import HTTPMethod, HTTPRequest, RequestParser, parse_request
from .response import HTTPResponse, HTTP_VERSION
from .status_codes import HTTPStatus
from .errors import HTTPError, ErrorKind

__all__ = [
    # Request parsing
    "HTTPMethod",
    "HTTPRequest",
    "RequestParser",
    "parse_request",

    # Response serialization
    "HTTPResponse",
    "HTTP_VERSION",

    # Status codes
    "HTTPStatus",

    # Errors
    "HTTPError",
    "ErrorKind",
]
