"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Turns a parsed request into a response by looking the URI up under the
served root directory.

=============================================================================
DISPATCH
=============================================================================

    ┌──────────┬──────────────────────────────────────────────────────────┐
    │  Method  │  Action                                                  │
    ├──────────┼──────────────────────────────────────────────────────────┤
    │  GET     │  200 + file bytes, or 404 if the file does not exist     │
    │  HEAD    │  200 + headers only, or 404                              │
    │  POST    │  501 Not Implemented, always                             │
    └──────────┴──────────────────────────────────────────────────────────┘

=============================================================================
URI TO PATH
=============================================================================

    root = /var/www

    "/"              →  /var/www/index.html
    "/css/site.css"  →  /var/www/css/site.css
    "//etc/passwd"   →  /var/www/etc/passwd    (leading slashes stripped)

Leading slashes MUST be stripped before joining: pathlib treats an
absolute right-hand side as a replacement, so Path("/var/www") / "/etc"
is "/etc". After joining we also check that the resolved path is still
inside the root, so "/../secret" is refused as well.

=============================================================================
"""

import logging
from pathlib import Path

from ..config import ServerConfig
from ..http.request import HTTPMethod, HTTPRequest
from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus
from ..http.errors import HTTPError


logger = logging.getLogger(__name__)


class StaticFileHandler:
    """
    Handler for serving files from the configured root directory.

    Errors are raised as HTTPError, never returned:

        try:
            response = handler.handle(request)
        except HTTPError as e:
            response = e.to_response()
    """

    INDEX_FILE = "index.html"

    def __init__(self, config: ServerConfig):
        self.config = config
        # Resolve once, for the traversal check in resolve_path()
        self.root_dir = Path(config.root).resolve()

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Handle a request according to its method.

        Raises:
            HTTPError: NOT_FOUND, NOT_IMPLEMENTED, or IO_FAILURE if the
                       file exists but cannot be read.
        """
        if request.method is HTTPMethod.GET:
            return self.serve_file(request)
        elif request.method is HTTPMethod.HEAD:
            return self.serve_file_headers(request)
        # POST: accepted by the parser, not supported here
        raise HTTPError.not_implemented()

    def resolve_path(self, uri: str) -> Path:
        """
        Map a request URI to an existing path under the root directory.

        Raises:
            HTTPError: NOT_FOUND if nothing exists there, or if the path
                       would escape the root directory. IO_FAILURE if the
                       filesystem refuses the lookup itself (name too
                       long, permission denied on a parent directory).
        """
        relative = self.INDEX_FILE if uri == "/" else uri.lstrip("/")
        path = self.root_dir / relative

        try:
            resolved = path.resolve()
        except OSError as e:
            raise HTTPError.io_failure(e) from e

        try:
            resolved.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Path traversal attempt: {uri}")
            raise HTTPError.not_found(uri)

        try:
            exists = path.exists()
        except OSError as e:
            raise HTTPError.io_failure(e) from e

        if not exists:
            raise HTTPError.not_found(uri)
        return path

    def serve_file_headers(self, request: HTTPRequest) -> HTTPResponse:
        """Respond to HEAD: same status and headers as GET, empty body."""
        self.resolve_path(request.uri)
        return HTTPResponse(
            status=HTTPStatus.OK,
            headers=dict(self.config.default_headers),
            body=b"",
        )

    def serve_file(self, request: HTTPRequest) -> HTTPResponse:
        """Respond to GET with the file's contents."""
        path = self.resolve_path(request.uri)
        try:
            # Note: whole file in memory; fine for a small static site
            content = path.read_bytes()
        except OSError as e:
            raise HTTPError.io_failure(e, context=f"failed to read {request.uri}") from e

        return HTTPResponse(
            status=HTTPStatus.OK,
            headers=dict(self.config.default_headers),
            body=content,
        )
