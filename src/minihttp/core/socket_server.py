"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

The connection acceptor: owns the listening socket and hands every
accepted client to a callback.

=============================================================================
SOCKET LIFECYCLE
=============================================================================

    socket() ──► setsockopt(SO_REUSEADDR) ──► bind() ──► listen()
                                                            │
                                                            ▼
                         ┌──────────────────────────► accept() ───┐
                         │                                         │
                         │    Connection(client_socket)            │
                         └──── connection_handler(conn) ◄──────────┘

accept() is given a one-second timeout so the loop can notice shutdown()
without needing a connection to arrive.

An error from accept() (for example EMFILE when out of descriptors) is
logged and the loop carries on; only shutdown() ends it.

=============================================================================
SIGNALS
=============================================================================

When started from the main thread, SIGINT (Ctrl+C) and SIGTERM call
shutdown(). Python only allows installing signal handlers on the main
thread, so a server started from a background thread (as in the tests)
skips this step and is stopped by calling shutdown() directly.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class SocketServer:
    """
    Listening socket plus accept loop.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        """
        Args:
            config: Server configuration containing host, port, backlog, etc.

        The socket is created lazily in start().
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set while the socket is listening
        self._ready_event = threading.Event()

        self._previous_handlers: Dict[int, Any] = {}

    @property
    def bound_address(self) -> Optional[Tuple[str, int]]:
        """Actual listening (IP, port); the OS picks the port when config.port is 0."""
        if self._socket is None:
            return None
        return self._socket.getsockname()[:2]

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Rebind immediately over connections left in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Bounded accept() so the loop can observe shutdown()
        sock.settimeout(1.0)

        return sock

    def _setup_signals(self):
        """Route SIGINT/SIGTERM to shutdown(); main thread only."""
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on main thread, skipping signal handlers")
            return

        def on_signal(signum, frame):
            logger.info(f"{signal.Signals(signum).name} received, stopping listener")
            self.shutdown()

        for signum in STOP_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, on_signal)

    def _restore_signals(self):
        while self._previous_handlers:
            signum, previous = self._previous_handlers.popitem()
            signal.signal(signum, previous)

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and run the accept loop.

        This method BLOCKS until shutdown() is called.

        Args:
            connection_handler: Called with each new Connection. Must return
                                quickly; the HTTP server starts a thread.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Cannot bind {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

        self._running = True
        self._setup_signals()

        host, port = self.bound_address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """Accept connections until shutdown() clears the running flag."""
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Re-check the running flag
            except OSError as e:
                if not self._running:
                    break
                logger.error(f"accept() failed: {e}")
                continue

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
                max_request_size=self.config.max_request_size,
            )

            try:
                connection_handler(conn)
            except Exception as e:
                logger.exception(f"[{conn.id}] Failed to dispatch connection: {e}")
                conn.close()

    def shutdown(self):
        """
        Stop the accept loop.

        Safe to call from any thread and more than once.
        """
        if self._running:
            logger.info("Stop requested, accept loop will exit")
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._ready_event.clear()
        logger.info("Listener closed")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. Returns False on timeout."""
        return self._ready_event.wait(timeout)
