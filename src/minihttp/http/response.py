"""
=============================================================================
HTTP RESPONSE ENCODER
=============================================================================

Builds HTTPResponse objects and serializes them to the exact bytes that go
onto the socket.

=============================================================================
WIRE FORMAT
=============================================================================

A response either carries an entity (it has a body or a Content-Type) or
it does not. The two shapes are:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  WITH ENTITY                                                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │   HTTP/1.1 200 OK\r\n                     ← status line             │
    │   Content-Encoding: gzip\r\n              ← only when negotiated    │
    │   Content-Type: text/plain\r\n                                      │
    │   Content-Length: 5\r\n                   ← always recomputed       │
    │   \r\n                                                              │
    │   hello                                   ← body (maybe compressed) │
    │   \r\n                                    ← trailing CRLF           │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │  WITHOUT ENTITY (root, 201, 404, 400, 413, 500)                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │   HTTP/1.1 404 Not Found\r\n                                        │
    │   \r\n                                                              │
    └─────────────────────────────────────────────────────────────────────┘

The trailing CRLF after an entity body is not part of strict HTTP/1.1
framing (Content-Length already delimits the body), but clients of this
server expect it, so it is always written, including after compressed
bytes.

Headers are emitted in insertion order, so a given response always
serializes to the same bytes.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .status_codes import HTTPStatus


TEXT_PLAIN = "text/plain"
OCTET_STREAM = "application/octet-stream"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Use ResponseBuilder or the helpers at the bottom of this module
    (ok, created, not_found, ...) rather than constructing it by hand.

    =========================================================================
    RESPONSE LIFECYCLE
    =========================================================================

        Handler returns          middleware may          to_bytes()
        HTTPResponse    ─────►   compress body   ─────►  serializes
            │                                                │
        HTTPResponse(                                   b"HTTP/1.1 200 OK\r\n
          status=200,                                     Content-Type: ...\r\n
          headers={...},                                  Content-Length: 5\r\n
          body=b"hello"                                   \r\n
        )                                                 hello\r\n"

    =========================================================================
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)  # Insertion-ordered
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def has_entity(self) -> bool:
        """True when the response frames a body (even an empty one)."""
        return bool(self.body) or "Content-Type" in self.headers

    def to_bytes(self) -> bytes:
        """
        Serialize the response for socket.sendall().

        Content-Length is always derived from the final body so it stays
        correct after compression; any stale value is overwritten in place.
        """
        response_headers = dict(self.headers)

        if self.has_entity:
            response_headers["Content-Length"] = str(len(self.body))
        else:
            response_headers.pop("Content-Length", None)

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")

        # Empty line separates headers from body
        lines.append("")
        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"

        if not self.has_entity:
            return header_bytes
        return header_bytes + self.body + b"\r\n"


class ResponseBuilder:
    """
    Fluent builder for HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type("text/plain")
            .body("hello")
            .build())
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = HTTPStatus(status)
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set the body, encoding str as UTF-8."""
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
#     return ok()                          # bare 200
#     return ok("hello")                   # text/plain
#     return ok(data, OCTET_STREAM)        # binary file
#     return created()
#     return not_found()
#
# =============================================================================

def ok(body: Union[str, bytes] = "", content_type: Optional[str] = None) -> HTTPResponse:
    """
    Create a 200 OK response.

    - ok()                       → no body, no headers
    - ok("text")                 → text/plain
    - ok(b"...", content_type)   → raw bytes with the given type
    """
    builder = ResponseBuilder().status(HTTPStatus.OK)

    if isinstance(body, str):
        if body or content_type:
            builder.content_type(content_type or TEXT_PLAIN).body(body)
    else:
        builder.body(body)
        if content_type:
            builder.content_type(content_type)

    return builder.build()


def created() -> HTTPResponse:
    """201 Created with no body."""
    return ResponseBuilder().status(HTTPStatus.CREATED).build()


def not_found() -> HTTPResponse:
    """404 Not Found with no body."""
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).build()


def internal_error() -> HTTPResponse:
    """500 Internal Server Error with no body."""
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).build()


def error_response(status: int) -> HTTPResponse:
    """
    Bare response for an error status code.

    Used for failures that happen before routing (parse errors), where the
    only information available is the status code.
    """
    return ResponseBuilder().status(HTTPStatus(status)).build()
