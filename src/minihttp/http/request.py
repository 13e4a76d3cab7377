"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the bytes a client sends into a structured HTTPRequest.

=============================================================================
WHAT WE PARSE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   POST /files/notes.txt HTTP/1.1\r\n       ← request line           │
    │   Host: localhost:4221\r\n                  ← recognized header      │
    │   User-Agent: curl/8.4.0\r\n                ← recognized header      │
    │   Accept: */*\r\n                           ← recognized header      │
    │   Accept-Encoding: gzip, deflate\r\n        ← recognized header      │
    │   Content-Length: 5\r\n                     ← body framing           │
    │   X-Anything: ignored\r\n                   ← stored, not used       │
    │   \r\n                                      ← end of headers         │
    │   hello                                     ← body (5 bytes)         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Only four header names are recognized, with their exact documented
capitalization: Host, User-Agent, Accept and Accept-Encoding. Every other
header line is still scanned (an unknown header never stops the scan) and
kept in `headers`, but nothing downstream looks at it except
Content-Length, which frames the body.

=============================================================================
STREAMING STATE MACHINE
=============================================================================

TCP does not deliver "a request", it delivers bytes in arbitrary chunks.
The parser is fed whatever recv() returned and advances through:

    REQUEST_LINE ──────► HEADERS ──────► BODY ──────► COMPLETE
         │                  │              │
         │ CRLF found       │ blank line,  │ Content-Length
         │                  │ length > 0   │ bytes buffered
         │                  │              │
         │                  └──────────────┴──► COMPLETE (no body)

Each feed() consumes as many complete lines (or body bytes) as the buffer
holds and returns True once the request is COMPLETE.

=============================================================================
KNOWN SIMPLIFICATIONS
=============================================================================

- No chunked transfer-encoding; a body is exactly Content-Length bytes.
- Accept-Encoding quality values (q=) are not interpreted; "gzip;q=0" is
  just an unknown token.
- The path is used verbatim: no percent-decoding, no ".." rejection.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class HTTPParseError(Exception):
    """
    Raised when HTTP request parsing fails.

    Carries the status code the client should receive:

        400 Bad Request       - Malformed request line or Content-Length
        413 Payload Too Large - Request exceeds max_request_size
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code  # HTTP status to return


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:           Request method token ("GET", "POST", ...)
        path:             Request target, always starts with "/"
        version:          HTTP version token, "HTTP/1.1" when omitted
        host:             Host header, "" when absent
        user_agent:       User-Agent header, "" when absent
        accept:           Accept header, "" when absent
        accept_encoding:  Accept-Encoding tokens in the order sent
        headers:          Every header line as received (name → value)
        body:             Content-Length bytes following the headers
        path_params:      Captures injected by the router
        client_address:   (ip, port) of the peer

    =========================================================================
    """

    method: str
    path: str
    version: str = "HTTP/1.1"

    # Recognized headers
    host: str = ""
    user_agent: str = ""
    accept: str = ""
    accept_encoding: List[str] = field(default_factory=list)

    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    # Router-injected parameters
    path_params: Dict[str, str] = field(default_factory=dict)

    client_address: tuple[str, int] = ("", 0)


class ParserState(Enum):
    """Where the streaming parser is within the request."""
    REQUEST_LINE = "request_line"
    HEADERS = "headers"
    BODY = "body"
    COMPLETE = "complete"


def parse_encoding_list(value: str) -> List[str]:
    """
    Split an Accept-Encoding value into its tokens.

        "gzip, deflate"      → ["gzip", "deflate"]
        "invalid-encoding"   → ["invalid-encoding"]
        ""                   → []
    """
    return [token.strip() for token in value.split(",") if token.strip()]


class RequestParser:
    """
    Incremental parser for a single HTTP request.

    Usage with a socket:

        parser = RequestParser()
        while not parser.feed(sock.recv(1024)):
            pass
        request = parser.build(client_address)

    Or in one shot, when all bytes are already in hand:

        request = RequestParser().parse(data)

    A parser instance handles exactly one request; create a new one for the
    next connection.
    """

    # Header name → HTTPRequest attribute. Matching is case-sensitive.
    RECOGNIZED_HEADERS = {
        "Host": "host",
        "User-Agent": "user_agent",
        "Accept": "accept",
        "Accept-Encoding": "accept_encoding",
    }

    def __init__(self, max_request_size: int = 10 * 1024 * 1024):
        self.max_request_size = max_request_size
        self.state = ParserState.REQUEST_LINE

        self._buffer = b""
        self._received = 0

        self._method: Optional[str] = None
        self._path: Optional[str] = None
        self._version = "HTTP/1.1"
        self._headers: Dict[str, str] = {}
        self._content_length = 0
        self._body = b""

    @property
    def is_complete(self) -> bool:
        return self.state is ParserState.COMPLETE

    @property
    def has_data(self) -> bool:
        """True once any byte has been fed."""
        return self._received > 0

    def feed(self, data: bytes) -> bool:
        """
        Consume another chunk of request bytes.

        Args:
            data: Bytes as returned by recv().

        Returns:
            True once the request is complete.

        Raises:
            HTTPParseError: On a malformed request line, a bad Content-Length,
                            or when the request grows past max_request_size.
        """
        if self.is_complete:
            return True

        self._received += len(data)
        if self._received > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {self._received} bytes",
                status_code=413,
            )
        self._buffer += data

        while not self.is_complete:
            if self.state is ParserState.BODY:
                if len(self._buffer) < self._content_length:
                    break
                self._body = self._buffer[:self._content_length]
                self._buffer = self._buffer[self._content_length:]
                self.state = ParserState.COMPLETE
                break

            line_end = self._buffer.find(b"\r\n")
            if line_end == -1:
                break  # Wait for the rest of the line

            line = self._buffer[:line_end].decode("utf-8", errors="replace")
            self._buffer = self._buffer[line_end + 2:]

            if self.state is ParserState.REQUEST_LINE:
                if line:  # Tolerate stray CRLFs before the request line
                    self._parse_request_line(line)
                    self.state = ParserState.HEADERS
            elif line:
                self._parse_header(line)
            else:
                self._content_length = self._parse_content_length()
                self.state = (
                    ParserState.BODY if self._content_length > 0
                    else ParserState.COMPLETE
                )

        return self.is_complete

    def build(self, client_address: tuple[str, int] = ("", 0)) -> HTTPRequest:
        """
        Build the HTTPRequest once parsing is complete.

        Raises:
            HTTPParseError: If the request is still incomplete.
        """
        if not self.is_complete:
            raise HTTPParseError(f"Incomplete request (stopped in {self.state.value})")

        request = HTTPRequest(
            method=self._method,
            path=self._path,
            version=self._version,
            headers=dict(self._headers),
            body=self._body,
            client_address=client_address,
        )

        for name, attribute in self.RECOGNIZED_HEADERS.items():
            if name not in self._headers:
                continue
            value = self._headers[name]
            if attribute == "accept_encoding":
                request.accept_encoding = parse_encoding_list(value)
            else:
                setattr(request, attribute, value)

        return request

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """Parse a request that is entirely contained in `data`."""
        self.feed(data)
        return self.build(client_address)

    # =========================================================================
    # LINE PARSERS
    # =========================================================================

    def _parse_request_line(self, line: str) -> None:
        """
        Parse "METHOD SP PATH [SP VERSION]".

        The version token is optional and never validated; the method is
        kept as sent so the router can decide what to do with it.
        """
        parts = line.split(" ")
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise HTTPParseError(f"Invalid request line: {line!r}")

        method, path = parts[0], parts[1]
        if not path.startswith("/"):
            raise HTTPParseError(f"Invalid request target: {path!r}")

        self._method = method
        self._path = path
        if len(parts) > 2 and parts[2]:
            self._version = parts[2]

    def _parse_header(self, line: str) -> None:
        """Parse "Name: value"; lines without a colon are skipped."""
        name, sep, value = line.partition(":")
        if not sep:
            return

        name = name.strip()
        value = value.strip()
        if not name:
            return

        # Repeated headers fold into one comma-separated value
        if name in self._headers:
            self._headers[name] += ", " + value
        else:
            self._headers[name] = value

    def _parse_content_length(self) -> int:
        raw = self._headers.get("Content-Length")
        if raw is None:
            return 0
        # ASCII digits only: int() would also take "+5", "1_0" and non-ASCII digits
        if not (raw.isascii() and raw.isdigit()):
            raise HTTPParseError(f"Invalid Content-Length: {raw!r}")
        return int(raw)


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    max_size: int = 10 * 1024 * 1024
) -> HTTPRequest:
    """
    Convenience function to parse a complete HTTP request.

    Args:
        data: Raw HTTP request bytes.
        client_address: Client's (ip, port) tuple.
        max_size: Maximum allowed request size.

    Returns:
        Parsed HTTPRequest object.
    """
    parser = RequestParser(max_request_size=max_size)
    return parser.parse(data, client_address)
