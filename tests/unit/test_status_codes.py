"""
Unit tests for the status code registry.
"""

import pytest

from simplehttp.http.status_codes import HTTPStatus


EXPECTED = [
    (200, "Ok"),
    (201, "Created"),
    (202, "Accepted"),
    (204, "No Content"),
    (301, "Moved Permanently"),
    (302, "Moved Temporarily"),
    (304, "Not Modified"),
    (400, "Bad Request"),
    (401, "Unauthorized"),
    (403, "Forbidden"),
    (404, "Not Found"),
    (500, "Internal Server Error"),
    (501, "Not Implemented"),
    (502, "Bad Gateway"),
    (503, "Service Unavailable"),
]


class TestHTTPStatus:

    @pytest.mark.parametrize("code, phrase", EXPECTED)
    def test_code_and_phrase(self, code, phrase):
        status = HTTPStatus(code)

        assert status.code == code
        assert status.phrase == phrase

    def test_registry_is_closed(self):
        assert sorted(s.code for s in HTTPStatus) == [code for code, _ in EXPECTED]

        with pytest.raises(ValueError):
            HTTPStatus(418)

    def test_default_is_ok(self):
        assert HTTPStatus.default() is HTTPStatus.OK

    def test_compares_as_int(self):
        assert HTTPStatus.NOT_FOUND == 404
        assert HTTPStatus.INTERNAL_ERROR > HTTPStatus.BAD_REQUEST

    def test_classification(self):
        assert HTTPStatus.NO_CONTENT.is_success
        assert not HTTPStatus.MOVED_TEMPORARILY.is_success
        assert not HTTPStatus.MOVED_TEMPORARILY.is_error
        assert HTTPStatus.FORBIDDEN.is_client_error
        assert HTTPStatus.FORBIDDEN.is_error
        assert not HTTPStatus.FORBIDDEN.is_server_error
        assert HTTPStatus.BAD_GATEWAY.is_server_error
        assert HTTPStatus.BAD_GATEWAY.is_error
