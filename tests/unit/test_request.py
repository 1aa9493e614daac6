"""
Unit tests for request parsing and id/body extraction.
"""

import pytest

from userservice.errors import InvalidId
from userservice.http.request import (
    HTTPRequest,
    RequestParser,
    extract_body,
    extract_id,
    parse_id,
    parse_request,
)


class TestRequestParser:
    """Tests for RequestParser."""

    @pytest.fixture
    def parser(self) -> RequestParser:
        return RequestParser()

    def test_parse_post_request(self, parser, sample_post_request):
        """Test parsing a create request with a JSON body."""
        request = parser.parse(sample_post_request, ("10.0.0.1", 50000))

        assert request.method == "POST"
        assert request.target == "/users"
        assert request.version == "HTTP/1.1"
        assert request.path_segments == ["users"]
        assert request.body == b'{"name": "Ada", "email": "ada@example.com"}'
        assert request.client_address == ("10.0.0.1", 50000)
        assert request.raw == sample_post_request

    def test_header_names_are_lowercased(self, parser, sample_post_request):
        request = parser.parse(sample_post_request)

        assert request.headers == {
            "host": "localhost:8080",
            "content-type": "application/json",
            "content-length": str(len(request.body)),
        }

    def test_repeated_headers_are_joined(self, parser):
        request = parser.parse(
            b"PUT /users/1 HTTP/1.1\r\n"
            b"X-Tag: a\r\n"
            b"X-Tag: b\r\n"
            b"\r\n"
        )

        assert request.headers["x-tag"] == "a, b"

    def test_malformed_header_lines_are_skipped(self, parser):
        request = parser.parse(
            b"DELETE /users/1 HTTP/1.1\r\n"
            b"this is not a header\r\n"
            b"Host: example\r\n"
            b"\r\n"
        )

        assert request.headers == {"host": "example"}

    def test_query_string_is_not_part_of_path(self, parser):
        request = parser.parse(b"PUT /users/3?dry=1 HTTP/1.1\r\n\r\n")

        assert request.target == "/users/3?dry=1"
        assert request.path_segments == ["users", "3"]

    def test_invalid_utf8_is_replaced_not_rejected(self, parser):
        """Undecodable bytes become U+FFFD, parsing still succeeds."""
        request = parser.parse(b"POST /users HTTP/1.1\r\n\r\n{\"name\": \"\xff\xfe\"}")

        assert request.method == "POST"
        assert "�" in request.text
        assert request.starts_with("POST /users")

    def test_empty_input(self, parser):
        """A client that connects and sends nothing still gets a request object."""
        request = parser.parse(b"")

        assert request.method == ""
        assert request.target == ""
        assert request.version == ""
        assert request.text == ""
        assert request.request_line == ""

    def test_incomplete_request_line(self, parser):
        request = parser.parse(b"GARBAGE")

        assert request.method == "GARBAGE"
        assert request.target == ""
        assert request.body == b""

    def test_request_line(self, parser, sample_delete_request):
        request = parser.parse(sample_delete_request)

        assert request.request_line == "DELETE /users/1 HTTP/1.1"

    def test_parse_request_helper(self, sample_put_request):
        request = parse_request(sample_put_request)

        assert isinstance(request, HTTPRequest)
        assert request.method == "PUT"
        assert extract_id(request.text) == "1"


class TestStartsWith:
    """The classification test is a literal prefix match on the decoded text."""

    @pytest.mark.parametrize("raw,prefix,expected", [
        ("POST /users HTTP/1.1\r\n\r\n", "POST /users", True),
        ("POST /users/7 HTTP/1.1\r\n\r\n", "POST /users", True),
        ("POST /usersXYZ HTTP/1.1\r\n\r\n", "POST /users", True),
        ("post /users HTTP/1.1\r\n\r\n", "POST /users", False),
        (" POST /users HTTP/1.1\r\n\r\n", "POST /users", False),
        ("PUT /users HTTP/1.1\r\n\r\n", "PUT /users/", False),
    ])
    def test_prefix(self, make_request, raw, prefix, expected):
        assert make_request(raw).starts_with(prefix) is expected


class TestExtractId:
    """Tests for extract_id()."""

    @pytest.mark.parametrize("text,expected", [
        ("PUT /users/42 HTTP/1.1\r\n\r\n", "42"),
        ("DELETE /users/7/extra HTTP/1.1\r\n\r\n", "7"),
        ("PUT /users/abc HTTP/1.1\r\n\r\n", "abc"),
        ("PUT /users/42?x=1 HTTP/1.1\r\n\r\n", "42?x=1"),
        ("DELETE /users/-5 HTTP/1.1\r\n\r\n", "-5"),
    ])
    def test_third_segment_first_word(self, text, expected):
        assert extract_id(text) == expected

    def test_empty_id_segment_picks_next_word(self):
        """'/users/ HTTP/1.1' leaves ' HTTP' as the third segment."""
        assert extract_id("DELETE /users/ HTTP/1.1\r\n\r\n") == "HTTP"

    def test_too_few_segments(self):
        assert extract_id("DELETE /users") == ""
        assert extract_id("") == ""

    def test_blank_third_segment(self):
        assert extract_id("PUT /users/   ") == ""


class TestExtractBody:
    """Tests for extract_body()."""

    def test_text_after_blank_line(self):
        text = 'POST /users HTTP/1.1\r\nHost: x\r\n\r\n{"name": "a", "email": "b"}'

        assert extract_body(text) == '{"name": "a", "email": "b"}'

    def test_last_blank_line_wins(self):
        assert extract_body("head\r\n\r\nfirst\r\n\r\nsecond") == "second"

    def test_no_blank_line_returns_everything(self):
        assert extract_body("POST /users HTTP/1.1") == "POST /users HTTP/1.1"

    def test_nothing_after_blank_line(self):
        assert extract_body("DELETE /users/1 HTTP/1.1\r\n\r\n") == ""


class TestParseId:
    """Tests for parse_id()."""

    @pytest.mark.parametrize("text,expected", [
        ("PUT /users/1 HTTP/1.1", 1),
        ("PUT /users/+5 HTTP/1.1", 5),
        ("PUT /users/-3 HTTP/1.1", -3),
        ("PUT /users/007 HTTP/1.1", 7),
        ("PUT /users/2147483647 HTTP/1.1", 2147483647),
        ("PUT /users/-2147483648 HTTP/1.1", -2147483648),
    ])
    def test_valid(self, text, expected):
        assert parse_id(text) == expected

    @pytest.mark.parametrize("text", [
        "PUT /users/abc HTTP/1.1",
        "PUT /users/1.5 HTTP/1.1",
        "PUT /users/1_000 HTTP/1.1",
        "PUT /users/2147483648 HTTP/1.1",
        "PUT /users/-2147483649 HTTP/1.1",
        "PUT /users/٣ HTTP/1.1",
        "PUT /users/ HTTP/1.1",
        "PUT /users",
    ])
    def test_invalid(self, text):
        with pytest.raises(InvalidId):
            parse_id(text)

    def test_invalid_id_keeps_raw_text(self):
        with pytest.raises(InvalidId) as exc_info:
            parse_id("DELETE /users/abc HTTP/1.1")

        assert exc_info.value.raw_id == "abc"
