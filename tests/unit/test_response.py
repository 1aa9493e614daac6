"""
Unit tests for response serialization.
"""

import pytest

from userservice.http.response import (
    HTTPResponse,
    HTTPStatus,
    internal_error,
    not_found,
    ok,
)


class TestHTTPStatus:
    """Tests for the fixed reason phrases."""

    @pytest.mark.parametrize("status,phrase", [
        (HTTPStatus.OK, "OK"),
        (HTTPStatus.NOT_FOUND, "NOT FOUND"),
        (HTTPStatus.INTERNAL_SERVER_ERROR, "INTERNAL SERVER ERROR"),
    ])
    def test_phrase(self, status, phrase):
        assert status.phrase == phrase


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        assert HTTPResponse(status=HTTPStatus.OK).status_line == "HTTP/1.1 200 OK"
        assert HTTPResponse(status=HTTPStatus.NOT_FOUND).status_line == "HTTP/1.1 404 NOT FOUND"
        assert (
            HTTPResponse(status=HTTPStatus.INTERNAL_SERVER_ERROR).status_line
            == "HTTP/1.1 500 INTERNAL SERVER ERROR"
        )

    def test_no_headers_are_added(self):
        """No Content-Length, no Date, no Server: only what the caller set."""
        response = HTTPResponse(body=b"hello")

        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\n\r\nhello"

    def test_set_header_chaining(self):
        response = (HTTPResponse()
            .set_header("X-One", "1")
            .set_header("X-Two", "2"))

        assert response.headers == {"X-One": "1", "X-Two": "2"}

    def test_set_body_encodes_str(self):
        response = HTTPResponse().set_body("héllo")

        assert response.body == "héllo".encode("utf-8")
        assert response.text == "héllo"

    def test_head_bytes(self):
        response = HTTPResponse(headers={"Content-Type": "application/json"}, body=b"x")

        assert response.head_bytes() == b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n\r\n"


class TestConvenienceFunctions:
    """The four response shapes the service can send, byte for byte."""

    def test_ok(self):
        assert ok("User created").to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: application/json\r\n"
            b"\r\n"
            b"User created"
        )

    def test_not_found_default_body(self):
        assert not_found().to_bytes() == b"HTTP/1.1 404 NOT FOUND\r\n\r\n404 Not Found"

    def test_not_found_custom_body(self):
        assert not_found("User not found").to_bytes() == (
            b"HTTP/1.1 404 NOT FOUND\r\n\r\nUser not found"
        )

    def test_internal_error(self):
        assert internal_error().to_bytes() == (
            b"HTTP/1.1 500 INTERNAL SERVER ERROR\r\n\r\nError"
        )
