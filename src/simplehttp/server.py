"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together: accept a connection, spawn a worker thread,
parse, handle, respond, close.

=============================================================================
REQUEST FLOW
=============================================================================

    SocketServer.accept()
          │
          ▼
    _handle_connection(conn) ── threading.Thread ──► _process_connection
                                                            │
          ┌─────────────────────────────────────────────────┘
          ▼
    1. RequestParser.parse(conn.reader)
          │    HTTPError? ──► error response ──► write ──► close
          ▼
    2. StaticFileHandler.handle(request)
          │    HTTPError? ──► error response
          ▼
    3. response.write(conn.writer)
          │    OSError? ──► log, abandon connection
          ▼
    4. access log, close

=============================================================================
FAILURE ISOLATION
=============================================================================

Each worker owns its connection, its request and its response. The only
thing workers share is the frozen ServerConfig. So when a worker fails:

    - Parse or handler errors become a 4xx/5xx response.
    - If even that response cannot be written, we log it and give up on
      that one connection. No retry.
    - Anything unexpected is logged with a traceback. If no response has
      been written yet the client still gets a 500, then only that
      worker's thread ends.

The accept loop and every other worker keep running.

=============================================================================
"""

import logging
import threading
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState
from .handlers import StaticFileHandler
from .http import HTTPRequest, HTTPResponse, HTTPError, RequestParser


logger = logging.getLogger(__name__)

access_logger = logging.getLogger("simplehttp.access")


class HTTPServer:
    """
    Minimal HTTP/1.0 file server.

        server = HTTPServer(ServerConfig(port=8080, root=Path("./public")))
        server.run()   # blocks until Ctrl+C / SIGTERM / shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Initialize the HTTP server.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()
        self._handler = StaticFileHandler(self.config)

    @property
    def address(self):
        """Bound (host, port) once running, configured address before."""
        return self._socket_server.address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, configure_logging: bool = True):
        """
        Start the server (blocking).

        Args:
            configure_logging: Set up the root logger from the config.
                               Embedders and tests that manage logging
                               themselves pass False.
        """
        if configure_logging:
            self._setup_logging()

        logger.info(f"Serving {self._handler.root_dir} on {self.config.host}:{self.config.port}")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. Workers already running finish."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        logging.basicConfig(
            level=self.config.level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("simplehttp").setLevel(self.config.level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Spawn a worker thread for a new connection.

        Called by SocketServer for each accepted client. Daemon threads
        don't keep the process alive after the accept loop ends.
        """
        worker = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"worker-{conn.id}",
            daemon=True,
        )
        worker.start()

    def _process_connection(self, conn: Connection):
        """
        Serve the single request carried by `conn` (runs in worker thread).
        """
        with conn:  # Context manager ensures connection is closed
            try:
                conn.state = ConnectionState.READING
                try:
                    request = self._parser.parse(conn.reader)
                except HTTPError as e:
                    logger.warning(f"[{conn.id}] Error while reading request: {e!r}")
                    self._send(conn, e.to_response())
                    return

                logger.debug(f"[{conn.id}] {request}")

                conn.state = ConnectionState.PROCESSING
                response = self.handle_request(request)

                if self._send(conn, response):
                    self._log_access(conn, request, response)

            except Exception as e:
                logger.exception(f"[{conn.id}] Connection error: {e}")
                # Only answer if no response has started going out
                if conn.state is not ConnectionState.WRITING:
                    self._send(conn, HTTPError.io_failure(e).to_response())

    def handle_request(self, request: HTTPRequest) -> HTTPResponse:
        """Run the handler, converting an HTTPError into its response."""
        try:
            return self._handler.handle(request)
        except HTTPError as e:
            if e.inner is not None:
                logger.error(f"Error while processing request: {e!r}")
            return e.to_response()

    def _send(self, conn: Connection, response: HTTPResponse) -> bool:
        """
        Write a response to the client.

        Returns:
            True if the response was written, False if the write failed.
        """
        conn.state = ConnectionState.WRITING
        try:
            response.write(conn.writer)
        except OSError as e:
            logger.error(f"[{conn.id}] Failed to write response: {e}")
            return False
        return True

    def _log_access(self, conn: Connection, request: HTTPRequest, response: HTTPResponse):
        """
        Emit one access log line, in the spirit of the Apache common format:

            127.0.0.1 - - "GET /index.html HTTP/1.0" 200 1043
        """
        access_logger.info(
            f'{conn.client_ip} - - "{request.request_line}" '
            f"{response.status.code} {len(response.body)}"
        )


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Create an HTTP server application.

    Example:
        app = create_app(ServerConfig(port=3000, root=Path("site")))
        app.run()
    """
    return HTTPServer(config)
