"""
Unit tests for HTTP request line parsing.
"""

import pytest

from fileserver.http.request import (
    Request,
    decode_request_line,
    parse_request_line,
)


class TestParseRequestLine:
    """Tests for parse_request_line()."""

    def test_parse_simple_get(self):
        """Test parsing a full HTTP/1.0 request line."""
        request = parse_request_line("GET /index.html HTTP/1.0\r\n")

        assert request == Request(method="GET", path="/index.html")
        assert request.is_get

    def test_method_is_uppercased(self):
        """Test that the method is case-insensitive."""
        assert parse_request_line("get /a").method == "GET"
        assert parse_request_line("Post /a").method == "POST"

    def test_path_kept_verbatim(self):
        """Test that the target is not normalized by the parser."""
        request = parse_request_line("GET /Docs/../A%20B.txt?q=1 HTTP/1.0")
        assert request.path == "/Docs/../A%20B.txt?q=1"

    def test_two_tokens_enough(self):
        """Test that the HTTP version is optional."""
        assert parse_request_line("GET /index.html") == Request("GET", "/index.html")

    def test_trailing_tokens_ignored(self):
        """Test that anything after the target is ignored."""
        request = parse_request_line("GET /a HTTP/1.0 extra stuff")
        assert request == Request("GET", "/a")

    def test_any_whitespace_separates(self):
        """Test tabs and repeated spaces as separators."""
        assert parse_request_line("  GET\t\t/a   HTTP/1.0\n") == Request("GET", "/a")

    def test_non_get_parses(self):
        """Test that other methods parse; routing decides what to do with them."""
        request = parse_request_line("POST /index.html HTTP/1.0")
        assert request.method == "POST"
        assert not request.is_get

    @pytest.mark.parametrize("line", ["", "\r\n", "   ", "GET", "GET\r\n", "/index.html"])
    def test_unparseable_returns_none(self, line):
        """Test that fewer than two tokens is reported as None, not raised."""
        assert parse_request_line(line) is None

    def test_request_is_immutable(self):
        request = parse_request_line("GET /a")
        with pytest.raises(AttributeError):
            request.path = "/b"


class TestDecodeRequestLine:
    """Tests for decode_request_line()."""

    def test_ascii(self):
        assert decode_request_line(b"GET / HTTP/1.0\r\n") == "GET / HTTP/1.0\r\n"

    def test_utf8(self):
        assert decode_request_line("GET /café".encode("utf-8")) == "GET /café"

    def test_invalid_bytes_replaced(self):
        """Test that undecodable bytes don't raise."""
        line = decode_request_line(b"GET /\xff\xfe")
        assert line.startswith("GET /")
        assert "�" in line
