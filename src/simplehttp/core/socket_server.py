"""
=============================================================================
CONNECTION ACCEPTOR
=============================================================================

Owns the listening TCP socket. Every accepted client is wrapped in a
Connection and passed to a callback; what happens next (HTTP, threads)
is the callback's business.

=============================================================================
WHAT THE ACCEPTOR DOES, IN ORDER
=============================================================================

    start(on_connection)
      │
      ├─ _bind()            socket(AF_INET, SOCK_STREAM)
      │                     SO_REUSEADDR, bind(host, port), listen(backlog)
      │                     port 0 → the OS picks, `address` reports it
      │
      ├─ _install_signals() SIGINT / SIGTERM → shutdown()   (main thread only)
      │
      ├─ ready              wait_until_ready() returns True from here on
      │
      └─ _serve()           ┌──────────────────────────────────────────┐
                            │  accept()  (wakes every POLL_INTERVAL s)  │
                            │     │                                     │
                            │     ├─ timeout  → check stop flag, retry  │
                            │     ├─ OSError  → log, retry              │
                            │     └─ client   → on_connection(conn)     │
                            └──────────────────────────────────────────┘

A failed accept() is about ONE client (reset mid-handshake, a brief fd
shortage). It is logged and the acceptor moves on to the next client.

=============================================================================
STOPPING
=============================================================================

shutdown() only sets an Event. The accept loop notices it on its next
wake-up, so the listener is closed at most POLL_INTERVAL seconds later.
Python only lets the main thread install signal handlers, so an acceptor
running in a background thread (tests, embedding) is stopped by calling
shutdown() directly.

=============================================================================
"""

import logging
import signal
import socket
import threading
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)

ConnectionCallback = Callable[[Connection], None]


class SocketServer:
    """
    Accepts TCP clients and hands each one to a callback.

        acceptor = SocketServer(config)
        acceptor.start(lambda conn: ...)   # blocks until shutdown()

    The callback runs on the accept thread, so it must hand real work off
    (HTTPServer starts a worker thread) and return.
    """

    # Seconds accept() blocks before re-checking the stop flag
    POLL_INTERVAL = 1.0

    STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)

    def __init__(self, config: ServerConfig):
        self.config = config

        self._listener: Optional[socket.socket] = None
        self._bound_address: Optional[Tuple[str, int]] = None
        self._previous_handlers: dict = {}

        self._ready = threading.Event()
        self._stopping = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._ready.is_set() and not self._stopping.is_set()

    @property
    def address(self) -> Tuple[str, int]:
        """
        (host, port) actually bound, or the configured pair before start().
        """
        return self._bound_address or (self.config.host, self.config.port)

    # =========================================================================
    # START / STOP
    # =========================================================================

    def start(self, on_connection: ConnectionCallback):
        """
        Bind, listen and accept until shutdown() is called.

        Raises:
            OSError: If the address cannot be bound. Nothing is left open.
        """
        self._stopping.clear()
        self._listener = self._bind()
        self._install_signals()

        logger.info(f"Listening on {self.address[0]}:{self.address[1]}")
        self._ready.set()

        try:
            self._serve(on_connection)
        finally:
            self._close()

    def shutdown(self):
        """Ask the accept loop to stop. Safe from signal handlers and other threads."""
        if not self._stopping.is_set():
            logger.info("Shutting down connection acceptor")
        self._stopping.set()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. False if `timeout` ran out first."""
        return self._ready.wait(timeout)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _bind(self) -> socket.socket:
        host, port = self.config.host, self.config.port

        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        # Rebind right away after a restart, even with clients in TIME_WAIT
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.settimeout(self.POLL_INTERVAL)

        try:
            listener.bind((host, port))
            listener.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Cannot listen on {host}:{port}: {e}")
            listener.close()
            raise

        self._bound_address = listener.getsockname()[:2]
        return listener

    def _serve(self, on_connection: ConnectionCallback):
        while not self._stopping.is_set():
            try:
                client, client_address = self._listener.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._stopping.is_set():
                    break
                logger.error(f"Failed to get client connection: {e}")
                continue

            logger.debug(f"Accepted {client_address[0]}:{client_address[1]}")
            on_connection(
                Connection(socket=client, address=client_address, timeout=self.config.timeout)
            )

    def _install_signals(self):
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Running off the main thread, leaving signal handlers alone")
            return

        def on_signal(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}")
            self.shutdown()

        for signum in self.STOP_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, on_signal)

    def _close(self):
        while self._previous_handlers:
            signum, handler = self._previous_handlers.popitem()
            signal.signal(signum, handler)

        if self._listener is not None:
            self._listener.close()
            self._listener = None

        self._ready.clear()
        logger.info("Connection acceptor stopped")
