"""
Unit tests for HTTP request parsing.
"""

import pytest

from minihttp.http.request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    ParserState,
    parse_encoding_list,
    parse_request,
)


class TestRequestParser:
    """Tests for RequestParser class."""

    def test_parse_simple_get(self, sample_get_request: bytes):
        """Test parsing a simple GET request."""
        parser = RequestParser()
        request = parser.parse(sample_get_request, ("127.0.0.1", 12345))

        assert request.method == "GET"
        assert request.path == "/echo/hello"
        assert request.version == "HTTP/1.1"
        assert request.client_address == ("127.0.0.1", 12345)

    def test_parse_recognized_headers(self, sample_get_request: bytes):
        """Test that the recognized headers land on their attributes."""
        request = parse_request(sample_get_request)

        assert request.host == "localhost:4221"
        assert request.user_agent == "pytest"
        assert request.accept == "*/*"
        assert request.accept_encoding == ["gzip", "deflate"]

    def test_missing_headers_default_to_empty(self):
        """Test parsing request with no headers."""
        request = parse_request(b"GET / HTTP/1.1\r\n\r\n")

        assert request.method == "GET"
        assert request.path == "/"
        assert request.host == ""
        assert request.user_agent == ""
        assert request.accept == ""
        assert request.accept_encoding == []
        assert len(request.headers) == 0

    def test_header_after_unknown_header_is_recognized(self):
        """An unrecognized header never stops the header scan."""
        raw = (
            b"GET /user-agent HTTP/1.1\r\n"
            b"X-Custom: whatever\r\n"
            b"User-Agent: curl/8.0\r\n"
            b"\r\n"
        )
        request = parse_request(raw)

        assert request.user_agent == "curl/8.0"
        assert request.headers["X-Custom"] == "whatever"

    def test_header_names_are_case_sensitive(self):
        """Only the exact header spelling is recognized."""
        raw = b"GET / HTTP/1.1\r\nuser-agent: lower\r\n\r\n"
        request = parse_request(raw)

        assert request.user_agent == ""
        assert request.headers["user-agent"] == "lower"

    def test_header_value_whitespace_stripped(self):
        """Test that surrounding whitespace is removed from values."""
        raw = b"GET / HTTP/1.1\r\nHost:    example.com   \r\n\r\n"
        assert parse_request(raw).host == "example.com"

    def test_header_value_keeps_inner_colons(self):
        """Only the first colon separates name from value."""
        raw = b"GET / HTTP/1.1\r\nHost: localhost:4221\r\n\r\n"
        assert parse_request(raw).host == "localhost:4221"

    def test_repeated_headers_are_joined(self):
        """Test that a repeated header folds into one value."""
        raw = (
            b"GET / HTTP/1.1\r\n"
            b"Accept-Encoding: br\r\n"
            b"Accept-Encoding: gzip\r\n"
            b"\r\n"
        )
        request = parse_request(raw)

        assert request.headers["Accept-Encoding"] == "br, gzip"
        assert request.accept_encoding == ["br", "gzip"]

    def test_header_line_without_colon_is_skipped(self):
        """Test that a junk header line is ignored."""
        raw = b"GET / HTTP/1.1\r\nnot a header\r\nHost: x\r\n\r\n"
        request = parse_request(raw)

        assert request.host == "x"
        assert list(request.headers) == ["Host"]

    def test_parse_post_with_body(self, sample_post_request: bytes):
        """Test parsing POST request with a body."""
        request = parse_request(sample_post_request)

        assert request.method == "POST"
        assert request.path == "/files/notes.txt"
        assert request.headers["Content-Length"] == "14"
        assert request.body == b"file contents\n"

    def test_body_limited_to_content_length(self):
        """Bytes past Content-Length are not part of the body."""
        raw = b"POST /files/a HTTP/1.1\r\nContent-Length: 3\r\n\r\nabcdef"
        assert parse_request(raw).body == b"abc"

    def test_no_content_length_means_empty_body(self):
        """Test that a body without Content-Length is ignored."""
        raw = b"POST /files/a HTTP/1.1\r\n\r\nignored"
        assert parse_request(raw).body == b""

    def test_binary_body_preserved(self):
        """Test that non-UTF-8 body bytes survive parsing."""
        body = bytes(range(256))
        raw = (
            b"POST /files/bin HTTP/1.1\r\n"
            + f"Content-Length: {len(body)}\r\n\r\n".encode()
            + body
        )
        assert parse_request(raw).body == body

    def test_path_is_not_decoded(self):
        """Percent-escapes and query strings stay in the path."""
        raw = b"GET /echo/a%20b?x=1 HTTP/1.1\r\n\r\n"
        assert parse_request(raw).path == "/echo/a%20b?x=1"

    def test_version_is_optional(self):
        """Test that a request line without a version still parses."""
        request = parse_request(b"GET /echo/abc\r\n\r\n")

        assert request.path == "/echo/abc"
        assert request.version == "HTTP/1.1"

    def test_version_kept_as_sent(self):
        """Test HTTP/1.0 version handling."""
        request = parse_request(b"GET / HTTP/1.0\r\n\r\n")
        assert request.version == "HTTP/1.0"

    def test_unknown_method_is_kept(self):
        """Unknown methods parse; the router decides what happens."""
        request = parse_request(b"BREW /pot HTTP/1.1\r\n\r\n")
        assert request.method == "BREW"

    def test_leading_blank_lines_tolerated(self):
        """Test that stray CRLFs before the request line are skipped."""
        request = parse_request(b"\r\n\r\nGET / HTTP/1.1\r\n\r\n")
        assert request.path == "/"

    @pytest.mark.parametrize("raw", [
        b"GET\r\n\r\n",
        b"GET  HTTP/1.1\r\n\r\n",
        b"GET echo/abc HTTP/1.1\r\n\r\n",
    ])
    def test_invalid_request_line(self, raw: bytes):
        """Test handling of malformed request lines."""
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("value", [b"abc", b"-1", b"+5", b"1_0", "٣".encode()])
    def test_invalid_content_length(self, value: bytes):
        """Test that a bad Content-Length is a 400."""
        raw = b"POST /files/a HTTP/1.1\r\nContent-Length: " + value + b"\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 400

    def test_underscore_content_length_with_matching_body(self):
        """Test that 1_0 is not read as ten even when ten bytes follow."""
        raw = b"POST /files/a HTTP/1.1\r\nContent-Length: 1_0\r\n\r\n0123456789"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 400

    def test_parse_request_too_large(self):
        """Test that oversized requests are rejected."""
        parser = RequestParser(max_request_size=100)
        raw = b"GET / HTTP/1.1\r\n" + b"X-Large: " + b"A" * 200 + b"\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parser.parse(raw)

        assert exc_info.value.status_code == 413

    def test_incomplete_request(self):
        """Test that build() refuses a request without its blank line."""
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(b"GET / HTTP/1.1\r\nHost: x\r\n")

        assert "headers" in str(exc_info.value)


class TestIncrementalParsing:
    """Tests for feeding a request in several chunks."""

    def test_split_across_chunks(self, sample_get_request: bytes):
        """Any split point produces the same request."""
        for split in range(1, len(sample_get_request)):
            parser = RequestParser()
            assert parser.feed(sample_get_request[:split]) is False
            assert parser.feed(sample_get_request[split:]) is True

            request = parser.build()
            assert request.path == "/echo/hello"
            assert request.user_agent == "pytest"

    def test_byte_at_a_time(self, sample_post_request: bytes):
        """Test feeding one byte per call."""
        parser = RequestParser()
        done = False
        for i in range(len(sample_post_request)):
            done = parser.feed(sample_post_request[i:i + 1])

        assert done is True
        assert parser.build().body == b"file contents\n"

    def test_state_transitions(self):
        """Test the parser walks through its states in order."""
        parser = RequestParser()
        assert parser.state is ParserState.REQUEST_LINE
        assert parser.has_data is False

        parser.feed(b"POST /files/a HTTP/1.1\r\n")
        assert parser.state is ParserState.HEADERS
        assert parser.has_data is True

        parser.feed(b"Content-Length: 2\r\n\r\n")
        assert parser.state is ParserState.BODY

        parser.feed(b"hi")
        assert parser.state is ParserState.COMPLETE
        assert parser.is_complete

    def test_waits_for_full_body(self):
        """Test that an incomplete body keeps the parser open."""
        parser = RequestParser()
        assert parser.feed(b"POST /files/a HTTP/1.1\r\nContent-Length: 5\r\n\r\nab") is False
        assert parser.feed(b"cde") is True
        assert parser.build().body == b"abcde"

    def test_size_limit_applies_across_chunks(self):
        """Test that the size limit counts every fed chunk."""
        parser = RequestParser(max_request_size=64)
        parser.feed(b"GET / HTTP/1.1\r\n")

        with pytest.raises(HTTPParseError) as exc_info:
            parser.feed(b"X-Pad: " + b"a" * 60 + b"\r\n")

        assert exc_info.value.status_code == 413


class TestEncodingList:
    """Tests for Accept-Encoding tokenization."""

    @pytest.mark.parametrize("value, expected", [
        ("gzip", ["gzip"]),
        ("gzip, deflate", ["gzip", "deflate"]),
        ("  br ,gzip  ", ["br", "gzip"]),
        ("invalid-encoding", ["invalid-encoding"]),
        ("", []),
        (" , ", []),
    ])
    def test_parse_encoding_list(self, value, expected):
        """Test splitting and trimming of tokens."""
        assert parse_encoding_list(value) == expected

    def test_quality_values_are_not_stripped(self):
        """Tokens are compared literally, so gzip;q=1 is not gzip."""
        assert parse_encoding_list("gzip;q=1.0") == ["gzip;q=1.0"]


class TestHTTPRequest:
    """Tests for HTTPRequest dataclass."""

    def test_defaults(self):
        """Test a request built by hand has empty recognized headers."""
        request = HTTPRequest(method="GET", path="/")

        assert request.version == "HTTP/1.1"
        assert request.user_agent == ""
        assert request.accept_encoding == []
        assert request.body == b""
        assert request.client_address == ("", 0)

    def test_mutable_defaults_not_shared(self):
        first = HTTPRequest(method="GET", path="/")
        first.path_params["text"] = "x"

        assert HTTPRequest(method="GET", path="/").path_params == {}
