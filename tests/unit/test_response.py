"""
Unit tests for HTTP response building and framing.
"""

import pytest

from minihttp.http.response import (
    HTTPResponse,
    ResponseBuilder,
    HTTPStatus,
    OCTET_STREAM,
    TEXT_PLAIN,
    ok,
    created,
    not_found,
    internal_error,
    error_response,
)


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        response = HTTPResponse(status=HTTPStatus.OK)
        assert response.status_line == "HTTP/1.1 200 OK"

        response = HTTPResponse(status=HTTPStatus.NOT_FOUND)
        assert response.status_line == "HTTP/1.1 404 Not Found"

        response = HTTPResponse(status=HTTPStatus.PAYLOAD_TOO_LARGE)
        assert response.status_line == "HTTP/1.1 413 Payload Too Large"

    def test_bare_response_has_no_headers(self):
        """A response without an entity is just the status line."""
        assert HTTPResponse().to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"
        assert not_found().to_bytes() == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_text_framing(self):
        """Test the exact bytes of a text response."""
        response = HTTPResponse(
            headers={"Content-Type": TEXT_PLAIN},
            body=b"hello",
        )

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 5\r\n"
            b"\r\n"
            b"hello\r\n"
        )

    def test_empty_body_with_content_type_still_framed(self):
        """Content-Type alone makes the response carry an entity."""
        response = HTTPResponse(headers={"Content-Type": TEXT_PLAIN})

        assert response.has_entity
        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 0\r\n"
            b"\r\n"
            b"\r\n"
        )

    def test_content_length_recomputed(self):
        """A stale Content-Length is replaced by the real body length."""
        response = HTTPResponse(
            headers={"Content-Type": TEXT_PLAIN, "Content-Length": "999"},
            body=b"abc",
        )

        result = response.to_bytes()
        assert b"Content-Length: 3\r\n" in result
        assert b"999" not in result

    def test_stale_content_length_dropped_without_entity(self):
        """Test that a bare response never advertises a length."""
        response = HTTPResponse(headers={"Content-Length": "5"})
        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_header_order_preserved(self):
        """Headers go out in insertion order, Content-Length last."""
        response = HTTPResponse(
            headers={"Content-Encoding": "gzip", "Content-Type": TEXT_PLAIN},
            body=b"x",
        )

        head = response.to_bytes().split(b"\r\n\r\n", 1)[0]
        assert head.split(b"\r\n")[1:] == [
            b"Content-Encoding: gzip",
            b"Content-Type: text/plain",
            b"Content-Length: 1",
        ]

    def test_to_bytes_does_not_mutate_headers(self):
        """Test that serializing leaves the header dict untouched."""
        response = HTTPResponse(headers={"Content-Type": TEXT_PLAIN}, body=b"x")
        response.to_bytes()
        assert "Content-Length" not in response.headers


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_status(self):
        """Test setting status code."""
        response = ResponseBuilder().status(HTTPStatus.CREATED).build()
        assert response.status == HTTPStatus.CREATED

    def test_status_accepts_int(self):
        """Test plain integers are converted to HTTPStatus."""
        response = ResponseBuilder().status(404).build()
        assert response.status is HTTPStatus.NOT_FOUND

    def test_content_type_and_body(self):
        """Test setting a content type and a str body."""
        response = ResponseBuilder().content_type(TEXT_PLAIN).body("Hello, World!").build()

        assert response.headers["Content-Type"] == "text/plain"
        assert response.body == b"Hello, World!"

    def test_bytes_body_kept(self):
        """Test bytes bodies pass through unchanged."""
        response = ResponseBuilder().content_type(OCTET_STREAM).body(b"\x00\x01").build()

        assert response.headers["Content-Type"] == "application/octet-stream"
        assert response.body == b"\x00\x01"

    def test_method_chaining(self):
        """Test fluent API chaining."""
        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .header("X-Custom", "value")
            .content_type(TEXT_PLAIN)
            .body("body")
            .build())

        assert response.status == HTTPStatus.OK
        assert response.headers["X-Custom"] == "value"
        assert response.body == b"body"

    def test_build_copies_headers(self):
        """Test that built responses do not share header dicts."""
        builder = ResponseBuilder().content_type(TEXT_PLAIN).body("a")
        first = builder.build()
        first.headers["X-Extra"] = "1"

        assert "X-Extra" not in builder.build().headers


class TestConvenienceFunctions:
    """Tests for convenience response functions."""

    def test_ok_bare(self):
        """ok() with no arguments carries no entity."""
        response = ok()

        assert response.status == HTTPStatus.OK
        assert response.headers == {}
        assert response.body == b""

    def test_ok_text(self):
        """Test ok() with text defaults to text/plain."""
        response = ok("Hello")

        assert response.headers["Content-Type"] == TEXT_PLAIN
        assert response.body == b"Hello"

    def test_ok_empty_text_with_type(self):
        """An explicit content type keeps an empty body framed."""
        response = ok("", TEXT_PLAIN)

        assert response.headers["Content-Type"] == TEXT_PLAIN
        assert response.has_entity

    def test_ok_bytes(self):
        """Test ok() with bytes and a content type."""
        response = ok(b"\xff\xfe", OCTET_STREAM)

        assert response.headers["Content-Type"] == OCTET_STREAM
        assert response.body == b"\xff\xfe"

    @pytest.mark.parametrize("factory, status", [
        (created, HTTPStatus.CREATED),
        (not_found, HTTPStatus.NOT_FOUND),
        (internal_error, HTTPStatus.INTERNAL_SERVER_ERROR),
    ])
    def test_bare_helpers(self, factory, status):
        """Test that status helpers produce empty responses."""
        response = factory()

        assert response.status == status
        assert not response.has_entity
        assert response.to_bytes() == f"HTTP/1.1 {int(status)} {status.phrase}\r\n\r\n".encode()

    def test_error_response(self):
        """Test error_response() maps a code to a bare response."""
        assert error_response(400).to_bytes() == b"HTTP/1.1 400 Bad Request\r\n\r\n"
        assert error_response(413).to_bytes() == b"HTTP/1.1 413 Payload Too Large\r\n\r\n"


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_status_phrases(self):
        """Test that all statuses have phrases."""
        for status in HTTPStatus:
            assert status.phrase != "Unknown"

        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.CREATED.phrase == "Created"
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"

    def test_compares_to_int(self):
        """Test IntEnum equality with plain integers."""
        assert HTTPStatus.OK == 200
        assert HTTPStatus(404) is HTTPStatus.NOT_FOUND
