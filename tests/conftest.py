"""
pytest configuration and fixtures.
"""

import socket
import threading
import time
from pathlib import Path
from typing import Generator
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttp import HTTPServer, ServerConfig, create_app


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request with every recognized header."""
    return (
        b"GET /echo/hello HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: */*\r\n"
        b"Accept-Encoding: gzip, deflate\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request writing a file."""
    body = b"file contents\n"
    return (
        b"POST /files/notes.txt HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"Content-Type: application/octet-stream\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
    ) + body


@pytest.fixture
def served_dir(tmp_path: Path) -> Path:
    """Served directory with one file already present."""
    directory = tmp_path / "served"
    directory.mkdir()
    (directory / "hello.txt").write_bytes(b"Hello, World!")
    return directory


@pytest.fixture
def app(served_dir: Path) -> HTTPServer:
    """Fully wired application, used without sockets via respond()."""
    return create_app(ServerConfig(directory=str(served_dir)))


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class LiveServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self.port = server.config.port
        self._thread: threading.Thread = None

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.socket_server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server and wait for the accept loop to exit."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, data: bytes, chunks: int = 1) -> bytes:
        """
        Send raw request bytes, optionally split into several writes, and
        read until the server closes the connection.
        """
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as sock:
            step = max(1, -(-len(data) // chunks))
            for i in range(0, len(data), step):
                sock.sendall(data[i:i + step])
                if chunks > 1:
                    time.sleep(0.05)  # Separate TCP segments

            received = b""
            while True:
                chunk = sock.recv(4096)
                if not chunk:
                    return received
                received += chunk


@pytest.fixture
def live_server(free_port: int, served_dir: Path) -> Generator[LiveServer, None, None]:
    """The full application listening on a free local port."""
    server = create_app(ServerConfig(
        host="127.0.0.1",
        port=free_port,
        directory=str(served_dir),
        timeout=5.0,
        log_level="WARNING",
    ))

    live = LiveServer(server)
    live.start()

    yield live

    live.stop()
