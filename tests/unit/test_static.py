"""
Unit tests for the static file handler.
"""

import errno
import logging
from pathlib import Path

import pytest

from simplehttp.config import ServerConfig
from simplehttp.handlers.static import StaticFileHandler
from simplehttp.http.errors import HTTPError, ErrorKind
from simplehttp.http.request import HTTPMethod, HTTPRequest
from simplehttp.http.status_codes import HTTPStatus


def make_request(method: HTTPMethod, uri: str) -> HTTPRequest:
    return HTTPRequest(method=method, uri=uri, version="HTTP/1.0")


@pytest.fixture
def handler(config: ServerConfig) -> StaticFileHandler:
    return StaticFileHandler(config)


class TestGet:

    def test_root_serves_index(self, handler: StaticFileHandler, served_root: Path):
        response = handler.handle(make_request(HTTPMethod.GET, "/"))

        assert response.status is HTTPStatus.OK
        assert response.body == (served_root / "index.html").read_bytes()

    def test_serves_file(self, handler: StaticFileHandler):
        response = handler.handle(make_request(HTTPMethod.GET, "/hello.txt"))

        assert response.status is HTTPStatus.OK
        assert response.body == b"hello world"

    def test_serves_nested_file(self, handler: StaticFileHandler):
        response = handler.handle(make_request(HTTPMethod.GET, "/sub/page.html"))
        assert response.body == b"<p>sub page</p>"

    def test_default_headers_are_sent(self, handler: StaticFileHandler):
        response = handler.handle(make_request(HTTPMethod.GET, "/hello.txt"))
        assert response.headers == {"Server": "SimpleHttp/0.1"}

    def test_response_headers_are_a_copy(self, handler: StaticFileHandler, config: ServerConfig):
        response = handler.handle(make_request(HTTPMethod.GET, "/hello.txt"))
        response.set_header("X-Extra", "1")

        assert "X-Extra" not in config.default_headers

    def test_custom_default_headers(self, served_root: Path):
        config = ServerConfig(root=served_root, default_headers={"Server": "Test", "X-A": "b"})
        response = StaticFileHandler(config).handle(make_request(HTTPMethod.GET, "/"))

        assert response.headers == {"Server": "Test", "X-A": "b"}

    def test_missing_file(self, handler: StaticFileHandler):
        with pytest.raises(HTTPError) as exc_info:
            handler.handle(make_request(HTTPMethod.GET, "/missing.html"))

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert exc_info.value.to_response().body == b"404: /missing.html not found"

    def test_missing_index(self, tmp_path: Path):
        handler = StaticFileHandler(ServerConfig(root=tmp_path))

        with pytest.raises(HTTPError) as exc_info:
            handler.handle(make_request(HTTPMethod.GET, "/"))

        assert str(exc_info.value) == "404: / not found"

    def test_unreadable_path_is_io_failure(self, handler: StaticFileHandler):
        """A directory exists but cannot be read as a file."""
        with pytest.raises(HTTPError) as exc_info:
            handler.handle(make_request(HTTPMethod.GET, "/sub"))

        error = exc_info.value
        assert error.kind is ErrorKind.IO_FAILURE
        assert error.status is HTTPStatus.INTERNAL_ERROR
        assert isinstance(error.inner, OSError)
        assert error.message.startswith("500: failed to read /sub:\r\n")


class TestHead:

    def test_head_has_no_body(self, handler: StaticFileHandler):
        response = handler.handle(make_request(HTTPMethod.HEAD, "/hello.txt"))

        assert response.status is HTTPStatus.OK
        assert response.headers == {"Server": "SimpleHttp/0.1"}
        assert response.body == b""

    def test_head_missing_file(self, handler: StaticFileHandler):
        with pytest.raises(HTTPError) as exc_info:
            handler.handle(make_request(HTTPMethod.HEAD, "/nope"))

        assert exc_info.value.kind is ErrorKind.NOT_FOUND


class TestPost:

    @pytest.mark.parametrize("uri", ["/", "/hello.txt", "/missing.html"])
    def test_post_not_implemented(self, handler: StaticFileHandler, uri):
        with pytest.raises(HTTPError) as exc_info:
            handler.handle(make_request(HTTPMethod.POST, uri))

        assert exc_info.value.kind is ErrorKind.NOT_IMPLEMENTED


class TestResolvePath:

    def test_leading_slashes_are_stripped(self, handler: StaticFileHandler, served_root: Path):
        assert handler.resolve_path("//hello.txt") == served_root.resolve() / "hello.txt"

    @pytest.mark.parametrize("uri", ["/../outside.txt", "/sub/../../outside.txt"])
    def test_traversal_is_refused(self, handler: StaticFileHandler, uri, caplog):
        with caplog.at_level(logging.WARNING, logger="simplehttp.handlers.static"):
            with pytest.raises(HTTPError) as exc_info:
                handler.resolve_path(uri)

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert exc_info.value.context == uri
        assert "Path traversal attempt" in caplog.text

    def test_dot_segments_inside_root(self, handler: StaticFileHandler, served_root: Path):
        path = handler.resolve_path("/sub/../hello.txt")
        assert path.resolve() == (served_root / "hello.txt").resolve()


class TestLookupFailures:
    """The filesystem refusing the lookup itself is a 500, never an escape."""

    @pytest.fixture
    def locked_lookup(self, monkeypatch):
        """Make existence checks under a "locked" directory fail like EACCES."""
        real_exists = Path.exists

        def exists(path, *args, **kwargs):
            if "locked" in path.parts:
                raise PermissionError(errno.EACCES, "Permission denied", str(path))
            return real_exists(path, *args, **kwargs)

        monkeypatch.setattr(Path, "exists", exists)

    @pytest.mark.parametrize("method", [HTTPMethod.GET, HTTPMethod.HEAD])
    def test_lookup_error_is_io_failure(self, handler: StaticFileHandler, locked_lookup, method):
        with pytest.raises(HTTPError) as exc_info:
            handler.handle(make_request(method, "/locked/file.txt"))

        error = exc_info.value
        assert error.kind is ErrorKind.IO_FAILURE
        assert error.context == ""
        assert isinstance(error.inner, PermissionError)
        assert error.__cause__ is error.inner
        assert error.message.startswith("500: ")

    def test_other_paths_still_served(self, handler: StaticFileHandler, locked_lookup):
        response = handler.handle(make_request(HTTPMethod.GET, "/hello.txt"))
        assert response.body == b"hello world"

    def test_overlong_name_never_escapes(self, handler: StaticFileHandler):
        """
        A name longer than the filesystem allows is either reported as
        missing or as a lookup failure, depending on how the running
        Python's Path.exists treats ENAMETOOLONG. It is always an HTTPError.
        """
        with pytest.raises(HTTPError) as exc_info:
            handler.handle(make_request(HTTPMethod.GET, "/" + "a" * 300))

        assert exc_info.value.kind in (ErrorKind.NOT_FOUND, ErrorKind.IO_FAILURE)
