"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from simplehttp import HTTPServer, ServerConfig


INDEX_HTML = b"<html><body><h1>Hello from SimpleHttp</h1></body></html>"


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP/1.0 GET request."""
    return (
        b"GET /index.html HTTP/1.0\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP/1.0 POST request with a body."""
    body = b'{"name": "John"}'
    return (
        b"POST /submit HTTP/1.0\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
    ) + body


@pytest.fixture
def served_root(tmp_path: Path) -> Path:
    """
    A small site to serve:

        tmp_path/
            outside.txt         (NOT under the root)
            www/
                index.html
                hello.txt
                sub/page.html
    """
    (tmp_path / "outside.txt").write_text("secret")

    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "hello.txt").write_text("hello world")
    (root / "sub").mkdir()
    (root / "sub" / "page.html").write_text("<p>sub page</p>")
    return root


@pytest.fixture
def config(served_root: Path) -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        root=served_root,
        log_level="WARNING",
    )


class TestServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"configure_logging": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def connect(self) -> socket.socket:
        sock = socket.create_connection(("127.0.0.1", self.port), timeout=5.0)
        return sock

    def request(self, data: bytes) -> bytes:
        """Send raw request bytes and read the response until the server closes."""
        with self.connect() as sock:
            sock.sendall(data)
            return read_until_eof(sock)

    def exchange(self, data: bytes) -> tuple:
        """Like request(), but split into (status_line, headers, body)."""
        return split_response(self.request(data))


def read_until_eof(sock: socket.socket) -> bytes:
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def split_response(raw: bytes) -> tuple:
    """Split raw response bytes into (status_line, headers dict, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("utf-8").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return lines[0], headers, body


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """Create and start a test server on a free port."""
    test_srv = TestServer(HTTPServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def server_factory(served_root: Path) -> Generator:
    """
    Start extra servers with custom settings:

        srv = server_factory(timeout=0.5)
    """
    started = []

    def factory(**overrides) -> TestServer:
        settings = {"host": "127.0.0.1", "port": 0, "root": served_root, "log_level": "WARNING"}
        settings.update(overrides)
        test_srv = TestServer(HTTPServer(ServerConfig(**settings)))
        test_srv.start()
        started.append(test_srv)
        return test_srv

    yield factory

    for test_srv in started:
        test_srv.stop()
