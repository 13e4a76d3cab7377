"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can put on the wire, with their reason phrases.

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      │
              │      └── Reason phrase
              └───────── Status code

Only a handful are ever produced:

    200 OK                  root, echo, user-agent, file read
    201 Created             file write
    400 Bad Request         request line could not be parsed
    404 Not Found           no route, or the file operation failed
    413 Payload Too Large   request exceeded max_request_size
    500 Internal Server Error   a handler raised

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200                        # Request served
    CREATED = 201                   # File written

    BAD_REQUEST = 400               # Malformed request line / headers
    NOT_FOUND = 404                 # Unrouted, or filesystem failure
    PAYLOAD_TOO_LARGE = 413         # Request exceeded the size limit

    INTERNAL_SERVER_ERROR = 500     # Handler raised unexpectedly

    @property
    def phrase(self) -> str:
        """Reason phrase used in the status line."""
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
