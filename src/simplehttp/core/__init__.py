"""
=============================================================================
CORE NETWORKING
=============================================================================

The transport side of the server:

    socket_server.py  - SocketServer: bind, listen, accept loop
    connection.py     - Connection: one client socket, reader/writer streams

CONCURRENCY MODEL

    One thread per accepted connection. Each thread parses one request,
    writes one response and exits. Threads share nothing mutable, so no
    locks are needed anywhere in the request path.

    ALTERNATIVES:
    - Thread pool: caps thread count, same isolation
    - Event loop (asyncio): more connections per process, more complex

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # Accepts connections
    "Connection",       # Wrapper for client socket
    "ConnectionState",  # Enum for connection lifecycle states
]
