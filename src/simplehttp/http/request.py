"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Reads one HTTP/1.0 request from a byte stream and turns it into a
structured HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─ REQUEST LINE ────────────────────────────────────────────────────┐
    │    GET /index.html HTTP/1.0\r\n                                   │
    │    ─┬─ ─────┬───── ────┬───                                       │
    │   Method   URI      Version                                       │
    └───────────────────────────────────────────────────────────────────┘
    ┌─ HEADERS ─────────────────────────────────────────────────────────┐
    │    User-Agent: curl/8.0\r\n                                       │
    │    Content-Length: 5\r\n                                          │
    └───────────────────────────────────────────────────────────────────┘
    ┌─ EMPTY LINE (separator) ──────────────────────────────────────────┐
    │    \r\n                                                           │
    └───────────────────────────────────────────────────────────────────┘
    ┌─ BODY (only if Content-Length was sent) ──────────────────────────┐
    │    hello                                                          │
    └───────────────────────────────────────────────────────────────────┘

=============================================================================
STREAMING, NOT BUFFERING
=============================================================================

The parser reads straight from a file-like object (socket.makefile("rb")
in production, io.BytesIO in tests). It never needs the whole request in
memory up front:

    stream.readline()   ──►  request line
    stream.readline()   ──►  header, header, ..., blank line
    stream.read(n)      ──►  body (n = Content-Length)

Each call blocks until the client sends more data or closes.

=============================================================================
LENIENCY
=============================================================================

1. Header lines without a colon are logged and skipped. They never fail
   the request.
2. Content-Length is honoured for EVERY method, GET included.
3. An unparseable Content-Length ("abc") means a zero length body.
4. The version token is taken as-is ("HTTP/9.9" is accepted).
5. Header names are stored exactly as received. "Content-Length" and
   "content-length" are DIFFERENT keys here.

=============================================================================
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import BinaryIO, Dict, Mapping, Optional

from .errors import HTTPError


logger = logging.getLogger(__name__)


class HTTPMethod(Enum):
    """The request methods the server recognises."""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"

    @classmethod
    def from_token(cls, token: str) -> Optional["HTTPMethod"]:
        """
        Look up a method token, ignoring case.

        Returns None for anything that is not GET, HEAD or POST.
        """
        return cls.__members__.get(token.upper())


@dataclass(frozen=True)
class HTTPRequest:
    """
    Represents a parsed HTTP request.

    Immutable once parsed, headers included (they are copied into a
    read-only mapping). `body` is None when the client sent no
    Content-Length header, and bytes (possibly empty) when it did.
    """

    method: HTTPMethod
    uri: str
    version: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    def __post_init__(self):
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def request_line(self) -> str:
        """The request line without its terminator, e.g. "GET / HTTP/1.0"."""
        return f"{self.method.value} {self.uri} {self.version}"

    def get_header(self, name: str, default: str = "") -> str:
        """Get a header value. The lookup is case-sensitive."""
        return self.headers.get(name, default)

    def __str__(self) -> str:
        lines = [f"Request: {self.request_line}", "Headers:"]
        for key, value in self.headers.items():
            lines.append(f"  {key}: {value}")

        # Only show the body if it is present and readable as text
        if self.body is not None:
            try:
                lines.append(f"Body:\n{self.body.decode('utf-8')}")
            except UnicodeDecodeError:
                lines.append(f"Body: <{len(self.body)} bytes, not utf-8>")
        return "\n".join(lines)


class RequestParser:
    """
    Parses an HTTP request from a binary stream into an HTTPRequest.

        Byte stream
              │
              ▼
        ┌───────────────────────────────────────────────────────────────┐
        │  1. Read request line ──► METHOD SP URI SP VERSION            │
        │     │  Bad?  → HTTPError.invalid_request(...)                 │
        │     ▼                                                          │
        │  2. Read headers until blank line                             │
        │     │  "Name: Value" pairs, no colon → skipped                │
        │     ▼                                                          │
        │  3. Read body if Content-Length is present                    │
        │     ▼                                                          │
        │  4. Build HTTPRequest                                         │
        └───────────────────────────────────────────────────────────────┘

    Any OSError from the stream, or request text that is not valid UTF-8,
    is raised as HTTPError.io_failure wrapping the original exception.
    """

    # Unsigned decimal integer, with an optional leading "+"
    CONTENT_LENGTH_PATTERN = re.compile(r"\+?[0-9]+")

    # Largest length accepted before falling back to 0 (unsigned 64-bit)
    MAX_CONTENT_LENGTH = 2 ** 64 - 1

    # Body bytes are pulled from the stream in chunks of this size
    READ_CHUNK_SIZE = 64 * 1024

    def parse(self, stream: BinaryIO) -> HTTPRequest:
        """
        Parse one request from `stream`.

        Args:
            stream: Binary file-like object with readline() and read(n).

        Returns:
            Parsed HTTPRequest object.

        Raises:
            HTTPError: INVALID_REQUEST for a malformed request line,
                       IO_FAILURE if the stream cannot be read.
        """
        # =====================================================================
        # STEP 1: Request line
        # =====================================================================
        request_line = self._read_line(stream)
        method, uri, version = self._parse_request_line(request_line)

        # =====================================================================
        # STEP 2: Headers, up to the blank line
        # =====================================================================
        headers: Dict[str, str] = {}
        while True:
            line = self._read_line(stream)
            # A line holding only "\r\n" ends the headers. So does EOF,
            # which readline() reports as an empty line.
            if not line.rstrip():
                break

            key, sep, value = line.partition(":")
            if not sep:
                logger.warning(f"Malformed header received: {line!r}")
                continue

            headers[key.strip()] = value.strip()

        # =====================================================================
        # STEP 3: Body
        # =====================================================================
        body = None
        if "Content-Length" in headers:
            length = self._parse_content_length(headers["Content-Length"])
            body = self._read_body(stream, length)

        return HTTPRequest(
            method=method,
            uri=uri,
            version=version,
            headers=headers,
            body=body,
        )

    def _read_line(self, stream: BinaryIO) -> str:
        """
        Read one line and strip its terminator ("\n" or "\r\n").

        Any other whitespace is left alone.
        """
        try:
            raw = stream.readline()
            line = raw.decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise HTTPError.io_failure(e) from e

        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        return line

    def _parse_request_line(self, line: str) -> tuple[HTTPMethod, str, str]:
        """
        Split the request line into (method, uri, version).

        Tokens are separated by single spaces. An empty token counts as
        missing, and tokens after the third are ignored.

        Raises:
            HTTPError: INVALID_REQUEST naming the first problem found.
        """
        parts = line.split(" ")

        token = parts[0]
        if not token:
            raise HTTPError.invalid_request("missing request method")
        method = HTTPMethod.from_token(token)
        if method is None:
            raise HTTPError.invalid_request(f"unrecognized http method: {token.upper()}")

        uri = parts[1] if len(parts) > 1 else ""
        if not uri:
            raise HTTPError.invalid_request("missing uri")

        version = parts[2] if len(parts) > 2 else ""
        if not version:
            raise HTTPError.invalid_request("missing http version")

        return method, uri, version

    def _parse_content_length(self, value: str) -> int:
        """Parse a Content-Length value, falling back to 0 if it is not a number."""
        if not self.CONTENT_LENGTH_PATTERN.fullmatch(value):
            return 0
        length = int(value)
        if length > self.MAX_CONTENT_LENGTH:
            return 0
        return length

    def _read_body(self, stream: BinaryIO, length: int) -> bytes:
        """
        Read exactly `length` bytes, or fewer if the stream ends first.

        Reading in chunks keeps a bogus huge Content-Length from allocating
        the whole buffer up front.
        """
        chunks = []
        remaining = length
        try:
            while remaining > 0:
                chunk = stream.read(min(remaining, self.READ_CHUNK_SIZE))
                if not chunk:
                    break
                chunks.append(chunk)
                remaining -= len(chunk)
        except OSError as e:
            raise HTTPError.io_failure(e) from e

        if remaining > 0:
            logger.warning(
                f"Stream ended before the body was complete: "
                f"expected {length} bytes, got {length - remaining}"
            )
        return b"".join(chunks)


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def parse_request(stream: BinaryIO) -> HTTPRequest:
    """
    Parse an HTTP request from a binary stream.

    Example:
        request = parse_request(io.BytesIO(b"GET / HTTP/1.0\\r\\n\\r\\n"))
    """
    return RequestParser().parse(stream)
