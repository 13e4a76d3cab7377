"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │  SocketServer.accept()                                               │
    │        │                                                             │
    │        ▼                                                             │
    │  _handle_connection(conn) ──► threading.Thread(_process_connection)  │
    │                                         │                            │
    │                                         ▼                            │
    │                              conn.read_request()                     │
    │                                         │                            │
    │                                         ▼                            │
    │                  LoggingMiddleware → CompressionMiddleware → Router  │
    │                                         │                            │
    │                                         ▼                            │
    │                        conn.send_response(response.to_bytes())       │
    │                                         │                            │
    │                                         ▼                            │
    │                                    conn.close()                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Every connection gets its own thread and serves exactly one request.
Failures stay inside that thread:

    HTTPParseError        → 400 / 413, then close
    handler exception     → 500, then close
    timeout / reset       → logged, close

=============================================================================
"""

import logging
import threading
from typing import Callable, Optional

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState
from .http import (
    HTTPRequest,
    HTTPResponse,
    HTTPParseError,
    Router,
    error_response,
    internal_error,
    parse_request,
)
from .middleware import MiddlewarePipeline, Middleware


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Thread-per-connection HTTP/1.1 server.

        server = HTTPServer(ServerConfig(port=4221))
        server.use(LoggingMiddleware())

        @server.get("/echo/*text")
        def echo(request):
            return ok(request.path_params["text"], TEXT_PLAIN)

        server.run()

    See minihttp.app.create_app for the fully wired application.
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._router = Router()
        self._middleware = MiddlewarePipeline()

        # Handler chain, middleware.wrap(router.handle); built on first use
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None

        self._running = False

    # =========================================================================
    # CONFIGURATION METHODS
    # =========================================================================

    def use(self, middleware: Middleware) -> "HTTPServer":
        """
        Add middleware. First added is outermost.

        Returns:
            Self for method chaining.
        """
        self._middleware.add(middleware)
        self._handler = None
        return self

    @property
    def router(self) -> Router:
        return self._router

    @property
    def socket_server(self) -> SocketServer:
        return self._socket_server

    @property
    def is_running(self) -> bool:
        return self._running

    def route(self, path: str, method: Optional[str] = None):
        """Register a route handler for any method."""
        return self._router.route(path, method)

    def get(self, path: str):
        """Register a GET route."""
        return self._router.get(path)

    def post(self, path: str):
        """Register a POST route."""
        return self._router.post(path)

    # =========================================================================
    # REQUEST PROCESSING (no sockets involved)
    # =========================================================================

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Run a parsed request through middleware and router.

        A handler exception becomes a 500 response; it never propagates.
        """
        if self._handler is None:
            self._handler = self._middleware.wrap(self._router.handle)

        try:
            return self._handler(request)
        except Exception as e:
            logger.exception(f"Handler error for {request.method} {request.path}: {e}")
            return internal_error()

    def respond(self, data: bytes, client_address: tuple[str, int] = ("", 0)) -> bytes:
        """
        Turn a complete raw request into raw response bytes.

        This is the whole protocol engine without the network: parse,
        dispatch, encode.
        """
        try:
            request = parse_request(data, client_address, self.config.max_request_size)
        except HTTPParseError as e:
            logger.info(f"Rejected request from {client_address[0] or '-'}: {e}")
            return error_response(e.status_code).to_bytes()

        return self.handle(request).to_bytes()

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Start the server (blocking).

        Blocks until shutdown() is called or SIGINT/SIGTERM arrives.

        Args:
            host: Override config host.
            port: Override config port.
        """
        if host is not None or port is not None:
            self.config = self.config.with_overrides(host=host, port=port)
            self._socket_server = SocketServer(self.config)

        self._setup_logging()
        self._handler = self._middleware.wrap(self._router.handle)
        self._running = True

        logger.info(f"Starting HTTP server on {self.config.host}:{self.config.port}")
        if self.config.directory:
            logger.info(f"Serving files from {self.config.directory}")
        else:
            logger.info("No served directory configured, /files/ requests will 404")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. In-flight connection threads finish on their own."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("minihttp").setLevel(level)

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Start a thread for a newly accepted connection.

        Called on the accept loop, so it must not block. Threads are daemons:
        they never keep the process alive after the listener stops.
        """
        worker = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        worker.start()

    def _process_connection(self, conn: Connection):
        """
        Serve a single request on a connection (runs in its own thread).

        read → parse → dispatch → write → close
        """
        with conn:  # Context manager ensures connection is closed
            try:
                try:
                    request = conn.read_request()
                except HTTPParseError as e:
                    logger.info(f"[{conn.id}] Bad request from {conn.client_ip}: {e}")
                    conn.send_response(error_response(e.status_code).to_bytes())
                    return

                if request is None:
                    logger.debug(f"[{conn.id}] Client closed without sending a request")
                    return

                conn.state = ConnectionState.PROCESSING
                response = self.handle(request)

                conn.send_response(response.to_bytes())

            except TimeoutError as e:
                logger.warning(f"[{conn.id}] {e}")
            except ConnectionError as e:
                logger.warning(f"[{conn.id}] Connection lost: {e}")
            except Exception as e:
                logger.exception(f"[{conn.id}] Connection error: {e}")
