"""
=============================================================================
APPLICATION
=============================================================================

The fixed route table, in match order (first match wins):

    ┌───┬────────┬──────────────────────┬──────────────────────────────┐
    │ # │ Method │ Pattern              │ Handler                      │
    ├───┼────────┼──────────────────────┼──────────────────────────────┤
    │ 1 │ GET    │ /                    │ root          200            │
    │ 2 │ GET    │ /echo/*text          │ echo          200 text/plain │
    │ 3 │ GET    │ /user-agent          │ user_agent    200 text/plain │
    │ 4 │ GET    │ /files/*filename     │ files.read    200 / 404      │
    │ 5 │ POST   │ /files/*filename     │ files.write   201 / 404      │
    │ - │ any    │ anything else        │ (router)      404            │
    └───┴────────┴──────────────────────┴──────────────────────────────┘

Middleware, outermost first: access logging, then compression.

=============================================================================
"""

from typing import Optional

from .config import ServerConfig
from .handlers import FileHandler, echo, root, user_agent
from .middleware import CompressionMiddleware, LoggingMiddleware
from .server import HTTPServer


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Build the server with its middleware and routes.

    Args:
        config: Server configuration; the served directory comes from
                config.directory.

    Returns:
        HTTPServer ready for run(), or for respond() in tests.
    """
    server = HTTPServer(config)

    server.use(LoggingMiddleware())
    server.use(CompressionMiddleware(level=server.config.compression_level))

    files = FileHandler(server.config.directory)

    server.get("/")(root)
    server.get("/echo/*text")(echo)
    server.get("/user-agent")(user_agent)
    server.get("/files/*filename")(files.read)
    server.post("/files/*filename")(files.write)

    return server
