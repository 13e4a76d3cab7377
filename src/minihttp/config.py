"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All settings live in one immutable ServerConfig built at startup and shared
by reference with every component and every connection thread. Because it
is frozen, no thread can change what another thread sees.

Sources, lowest to highest precedence:

    1. Dataclass defaults             ServerConfig()
    2. Environment variables          ServerConfig.from_env()
    3. Command-line flags             python -m minihttp --port 8080

=============================================================================
"""

from dataclasses import dataclass, replace
from typing import Optional
import os


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ServerConfig:
    """
    Server configuration.

    =========================================================================
    SETTINGS
    =========================================================================

    NETWORK
    - host, port, backlog

    CONNECTIONS
    - buffer_size, timeout, max_request_size

    CONTENT
    - directory, compression_level

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """The IP address to bind to. "0.0.0.0" listens on all interfaces."""

    port: int = 4221
    """The port number to listen on. 0 lets the OS pick a free port."""

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    # ─────────────────────────────────────────────────────────────────────
    # CONNECTION SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    buffer_size: int = 1024
    """Bytes requested per recv() call while reading a request."""

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = wait forever: a silent client holds its thread until it
    disconnects.
    """

    max_request_size: int = 10 * 1024 * 1024  # 10 MB
    """Largest request (headers + body) accepted before answering 413."""

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    directory: Optional[str] = None
    """
    Served directory for the /files/ routes.
    None or "" makes every file request answer 404.
    """

    compression_level: int = 6
    """gzip/deflate level, 0-9."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST       Server host (default: 127.0.0.1)
        HTTP_PORT       Server port (default: 4221)
        HTTP_DIRECTORY  Served directory (default: unset)
        HTTP_TIMEOUT    Connection timeout in seconds (default: unset)
        HTTP_LOG_LEVEL  Logging level (default: INFO)

        =====================================================================
        """
        timeout = os.getenv("HTTP_TIMEOUT")
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "4221")),
            directory=os.getenv("HTTP_DIRECTORY") or None,
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    def with_overrides(self, **overrides) -> "ServerConfig":
        """
        Copy of this config with the given fields replaced.

        None values are ignored, so unset CLI flags keep the current value.
        """
        changes = {name: value for name, value in overrides.items() if value is not None}
        return replace(self, **changes)

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a bad value fails immediately, not on the
        first request.

        Raises:
            ValueError: Describing the first invalid setting.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 64:
            raise ValueError("buffer_size must be >= 64")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.max_request_size < self.buffer_size:
            raise ValueError("max_request_size must be >= buffer_size")

        if not 0 <= self.compression_level <= 9:
            raise ValueError("compression_level must be 0-9")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
