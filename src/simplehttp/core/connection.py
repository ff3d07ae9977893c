"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps one accepted client socket for the single request it will carry.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

HTTP/1.0 without keep-alive is the simplest possible lifecycle:

      NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSED
                │                            │
                └──────── error ─────────────┘
                      (best-effort error response, then close)

The socket is exposed as two buffered file objects:

    reader = socket.makefile("rb")   ──► RequestParser.parse(reader)
    writer = socket.makefile("wb")   ──► HTTPResponse.write(writer)

Buffered readers give us readline() and read(n) for free, which is
exactly what the parser needs.

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, for logging and debugging."""
    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Parsing the request
    PROCESSING = "processing"  # Request parsed, handler running
    WRITING = "writing"        # Sending the response
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    One accepted client, from accept() to close().

    Attributes:
        socket: The socket accept() returned for this client.
        address: The peer address, (ip, port) for TCP.
        id: Short unique identifier used in log lines.
        timeout: Socket timeout in seconds, None to block forever.
        state: Where the worker is in the request lifecycle.
        created_at: Timestamp when the connection was accepted.
    """

    socket: socket.socket
    address: tuple

    # Filled in at accept time
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    timeout: Optional[float] = None
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    _reader: Optional[BinaryIO] = field(default=None, repr=False)
    _writer: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        # settimeout(None) puts the socket in blocking mode
        self.socket.settimeout(self.timeout)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def age(self) -> float:
        """Seconds since accept()."""
        return time.time() - self.created_at

    @property
    def reader(self) -> BinaryIO:
        """Buffered binary stream over the receiving side of the socket."""
        if self._reader is None:
            self._reader = self.socket.makefile("rb")
        return self._reader

    @property
    def writer(self) -> BinaryIO:
        """Buffered binary stream over the sending side of the socket."""
        if self._writer is None:
            self._writer = self.socket.makefile("wb")
        return self._writer

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        1. shutdown(SHUT_WR): Tell the client we're done sending (FIN).
           The client reads the body until this EOF.
        2. Close the file objects, then the socket itself.

        Errors are ignored: the client may already be gone.
        """
        if self.state is ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        for stream in (self._reader, self._writer):
            if stream is None:
                continue
            try:
                stream.close()
            except OSError:
                pass  # Unflushed data to a dead peer

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Always close, even if the worker raised."""
        self.close()
        return False  # Don't suppress exceptions
