"""
=============================================================================
HTTP STATUS CODES (RFC 1945)
=============================================================================

This module defines the fixed set of status codes the server can emit,
each with its reason phrase.

=============================================================================
THE STATUS REGISTRY
=============================================================================

HTTP/1.0 only needs a handful of codes. We keep the set CLOSED: nothing
outside this table can ever appear in a status line we write.

    ┌────────┬──────────────────────────────────────────────────────────────┐
    │  2xx   │ 200 Ok                   201 Created                        │
    │        │ 202 Accepted             204 No Content                     │
    ├────────┼──────────────────────────────────────────────────────────────┤
    │  3xx   │ 301 Moved Permanently    302 Moved Temporarily              │
    │        │ 304 Not Modified                                            │
    ├────────┼──────────────────────────────────────────────────────────────┤
    │  4xx   │ 400 Bad Request          401 Unauthorized                   │
    │        │ 403 Forbidden            404 Not Found                      │
    ├────────┼──────────────────────────────────────────────────────────────┤
    │  5xx   │ 500 Internal Server Error                                   │
    │        │ 501 Not Implemented      502 Bad Gateway                    │
    │        │ 503 Service Unavailable                                     │
    └────────┴──────────────────────────────────────────────────────────────┘

Q: "Why 'Moved Temporarily' and not 'Found'?"
A: "302 was named 'Moved Temporarily' in HTTP/1.0 (RFC 1945).
   HTTP/1.1 renamed it to 'Found'. We speak HTTP/1.0."

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    This enum extends IntEnum, so status codes can be used as integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    # 2xx SUCCESS
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    # 3xx REDIRECTION
    MOVED_PERMANENTLY = 301
    MOVED_TEMPORARILY = 302
    NOT_MODIFIED = 304

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404

    # 5xx SERVER ERRORS
    INTERNAL_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503

    @classmethod
    def default(cls) -> "HTTPStatus":
        """Status used when a response does not specify one."""
        return cls.OK

    @property
    def code(self) -> int:
        """Numeric status code, as written in the status line."""
        return int(self)

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.0 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └───────── Status code
        """
        return _STATUS_PHRASES[self]

    @property
    def is_success(self) -> bool:
        return 200 <= self < 300

    @property
    def is_client_error(self) -> bool:
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self < 600

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


# =============================================================================
# REASON PHRASES
# =============================================================================

_STATUS_PHRASES = {
    HTTPStatus.OK: "Ok",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NO_CONTENT: "No Content",

    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.MOVED_TEMPORARILY: "Moved Temporarily",
    HTTPStatus.NOT_MODIFIED: "Not Modified",

    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",

    HTTPStatus.INTERNAL_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.BAD_GATEWAY: "Bad Gateway",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
}
