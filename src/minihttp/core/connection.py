"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for the lifetime of its single request.

=============================================================================
CONNECTION LIFECYCLE
=============================================================================

    NEW ──────► READING ──────► PROCESSING ──────► WRITING
     │             │                                  │
     │             │                                  │
     └──────────► CLOSING ◄───────────────────────────┘
                    │
                    ▼
                  CLOSED

There is no keep-alive: after one response the connection closes.

=============================================================================
READING
=============================================================================

recv() returns whatever the kernel has, which may be half a request line
or the headers without the body. read_request() keeps calling recv() and
feeding a RequestParser until the parser reports the request complete:

    recv() ──► parser.feed() ──► complete? ──no──► recv() ...
                                    │
                                   yes
                                    ▼
                              parser.build()

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid

from ..http.request import HTTPParseError, HTTPRequest, RequestParser


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, used for logging and close()."""
    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Receiving request bytes
    PROCESSING = "processing"  # Request parsed, handler is executing
    WRITING = "writing"        # Sending response bytes
    CLOSING = "closing"        # Shutdown sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short connection identifier for log lines.
        state: Current connection state.
        created_at: Timestamp when connection was accepted.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 1024
    timeout: Optional[float] = None
    max_request_size: int = 10 * 1024 * 1024

    def __post_init__(self):
        # Blocking mode; timeout None means block forever
        self.socket.setblocking(True)
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[HTTPRequest]:
        """
        Read and parse one HTTP request from the socket.

        Returns:
            The parsed request, or None if the client closed the connection
            before sending anything.

        Raises:
            HTTPParseError: Malformed, oversized, or truncated request.
            TimeoutError: The configured timeout elapsed mid-read.
            ConnectionError: The client reset the connection.
        """
        self.state = ConnectionState.READING
        parser = RequestParser(max_request_size=self.max_request_size)

        while True:
            try:
                chunk = self.socket.recv(self.buffer_size)
            except socket.timeout:
                raise TimeoutError(f"Request read timed out after {self.timeout}s")

            if not chunk:
                # Client closed its side
                if not parser.has_data:
                    return None
                raise HTTPParseError(
                    f"Connection closed mid-request (in {parser.state.value})"
                )

            if parser.feed(chunk):
                return parser.build(self.address)

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        Uses sendall() so a partial send is never mistaken for success.

        Returns:
            True if send succeeded, False if connection lost.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN so the client sees end-of-response
        2. drain anything the client still sends
        3. close(): release the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # Includes socket.timeout

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure connection is closed."""
        self.close()
        return False  # Don't suppress exceptions
