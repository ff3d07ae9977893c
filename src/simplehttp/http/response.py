"""
=============================================================================
HTTP RESPONSE
=============================================================================

Holds a response while it is being built and serializes it to the exact
bytes that go on the wire.

=============================================================================
HTTP/1.0 RESPONSE ANATOMY
=============================================================================

    ┌─ STATUS LINE ─────────────────────────────────────────────────────┐
    │    HTTP/1.0 200 Ok\r\n                                            │
    │    ────┬─── ─┬─ ─┬                                                │
    │    Version  Code Phrase                                          │
    └───────────────────────────────────────────────────────────────────┘
    ┌─ HEADERS (zero or more, any order) ───────────────────────────────┐
    │    Server: SimpleHttp/0.1\r\n                                     │
    └───────────────────────────────────────────────────────────────────┘
    ┌─ EMPTY LINE ──────────────────────────────────────────────────────┐
    │    \r\n                                                           │
    └───────────────────────────────────────────────────────────────────┘
    ┌─ BODY (verbatim) ─────────────────────────────────────────────────┐
    │    <html>...</html>                                               │
    └───────────────────────────────────────────────────────────────────┘

The serializer adds NOTHING on its own: no Date, no Content-Length, no
Server header. What the caller put in `headers` is exactly what is sent.
Header names and values are not checked for embedded CR/LF either, so
callers must not copy untrusted text into them.

Since every connection carries one request and is then closed, the client
finds the end of the body by reading until EOF.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Union

from .status_codes import HTTPStatus


HTTP_VERSION = "HTTP/1.0"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

        Handler returns          to_bytes()              Socket sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes
    """

    status: HTTPStatus = HTTPStatus.OK                     # HTTP status code (enum)
    headers: Dict[str, str] = field(default_factory=dict)  # Response headers
    body: bytes = b""                                      # Response body

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line (without the trailing CRLF).

        Example: "HTTP/1.0 404 Not Found"
        """
        return f"{HTTP_VERSION} {self.status.code} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """
        Set a response header.

        Returns self for method chaining:
            response.set_header("X-One", "1").set_header("X-Two", "2")
        """
        self.headers[name] = value
        return self

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the response body. Strings are encoded as UTF-8."""
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = body
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize the response to bytes for sending over a socket.

            HTTP/1.0 200 Ok\r\n          ← Status line
            Server: SimpleHttp/0.1\r\n   ← One line per header
            \r\n                         ← Empty line (separator)
            <body bytes>                 ← Body, untouched
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")

        # The empty string adds the blank separator line after the join
        lines.append("")
        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"

        return header_bytes + self.body

    def write(self, stream: BinaryIO) -> None:
        """
        Write the serialized response to a binary stream and flush it.

        Raises:
            OSError: If the underlying transport fails.
        """
        stream.write(self.to_bytes())
        stream.flush()
