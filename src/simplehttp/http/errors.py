"""
=============================================================================
HTTP ERRORS
=============================================================================

Every failure the server can report to a client is an HTTPError. There
are exactly four kinds, and each one maps to exactly one status code:

    ┌──────────────────┬─────────────────────────┬───────────────────────┐
    │  ErrorKind       │  Raised when            │  Status               │
    ├──────────────────┼─────────────────────────┼───────────────────────┤
    │  IO_FAILURE      │  socket/file read fails │  500 Internal Error   │
    │  INVALID_REQUEST │  bad request line       │  400 Bad Request      │
    │  NOT_FOUND       │  file does not exist    │  404 Not Found        │
    │  NOT_IMPLEMENTED │  POST                   │  501 Not Implemented  │
    └──────────────────┴─────────────────────────┴───────────────────────┘

The error is raised where the problem is detected (parser, handler) and
caught at the connection boundary, where `to_response()` turns it into
something we can send:

    raise HTTPError.not_found("/missing.html")
        │
        ▼
    except HTTPError as e:
        e.to_response()  ──►  HTTP/1.0 404 Not Found\r\n
                              \r\n
                              404: /missing.html not found

=============================================================================
"""

from enum import Enum
from typing import Optional

from .response import HTTPResponse
from .status_codes import HTTPStatus


class ErrorKind(Enum):
    """The closed set of error kinds."""
    IO_FAILURE = "io_failure"
    INVALID_REQUEST = "invalid_request"
    NOT_FOUND = "not_found"
    NOT_IMPLEMENTED = "not_implemented"


class HTTPError(Exception):
    """
    Raised when a request cannot be served.

    Use the named constructors rather than calling the class directly:

        HTTPError.io_failure(exc, context="failed to read /index.html")
        HTTPError.invalid_request("missing uri")
        HTTPError.not_found("/missing.html")
        HTTPError.not_implemented()

    Attributes:
        kind: Which of the four error kinds this is.
        context: Free text. The reason for INVALID_REQUEST, the resource
                 for NOT_FOUND, optional extra detail for IO_FAILURE.
        inner: The wrapped exception for IO_FAILURE, else None.
    """

    def __init__(
        self,
        kind: ErrorKind,
        context: str = "",
        inner: Optional[BaseException] = None,
    ):
        self.kind = kind
        self.context = context
        self.inner = inner
        super().__init__(self.message)

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def io_failure(cls, inner: BaseException, context: str = "") -> "HTTPError":
        return cls(ErrorKind.IO_FAILURE, context, inner)

    @classmethod
    def invalid_request(cls, reason: str) -> "HTTPError":
        return cls(ErrorKind.INVALID_REQUEST, reason)

    @classmethod
    def not_found(cls, uri: str) -> "HTTPError":
        return cls(ErrorKind.NOT_FOUND, uri)

    @classmethod
    def not_implemented(cls) -> "HTTPError":
        return cls(ErrorKind.NOT_IMPLEMENTED)

    # =========================================================================
    # CLASSIFICATION AND RENDERING
    # =========================================================================

    @property
    def status(self) -> HTTPStatus:
        """The status code this error is reported with."""
        kind = self.kind
        if kind is ErrorKind.IO_FAILURE:
            return HTTPStatus.INTERNAL_ERROR
        elif kind is ErrorKind.INVALID_REQUEST:
            return HTTPStatus.BAD_REQUEST
        elif kind is ErrorKind.NOT_FOUND:
            return HTTPStatus.NOT_FOUND
        elif kind is ErrorKind.NOT_IMPLEMENTED:
            return HTTPStatus.NOT_IMPLEMENTED
        raise ValueError(f"Unknown error kind: {kind}")

    @property
    def message(self) -> str:
        """
        Human readable message, used as the body of the error response.

            IO_FAILURE       "500: <inner>"  or  "500: <context>:\r\n<inner>"
            INVALID_REQUEST  "400: <reason>"
            NOT_FOUND        "404: <uri> not found"
            NOT_IMPLEMENTED  "501: resource or method not implemented"
        """
        code = self.status.code
        kind = self.kind
        if kind is ErrorKind.IO_FAILURE:
            if not self.context:
                return f"{code}: {self.inner}"
            return f"{code}: {self.context}:\r\n{self.inner}"
        elif kind is ErrorKind.INVALID_REQUEST:
            return f"{code}: {self.context}"
        elif kind is ErrorKind.NOT_FOUND:
            return f"{code}: {self.context} not found"
        elif kind is ErrorKind.NOT_IMPLEMENTED:
            return f"{code}: resource or method not implemented"
        raise ValueError(f"Unknown error kind: {kind}")

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"HTTPError(kind={self.kind.name}, context={self.context!r}, inner={self.inner!r})"

    def to_response(self) -> HTTPResponse:
        """Build the response sent to the client for this error."""
        return HTTPResponse(
            status=self.status,
            headers={},
            body=self.message.encode("utf-8"),
        )
