"""
=============================================================================
MINIHTTP - Minimal HTTP/1.1 Server on Raw Sockets
=============================================================================

A small HTTP/1.1 origin server: a handful of fixed endpoints, optional
gzip/deflate response compression, and reading/writing files in one
configured directory. One request per connection, one thread per
connection.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttp/
    ├── __init__.py          # Package exports
    ├── __main__.py          # CLI entry point (python -m minihttp)
    ├── app.py               # create_app(): routes + middleware
    ├── server.py            # HTTPServer: parse → dispatch → encode
    ├── config.py            # ServerConfig dataclass
    ├── core/
    │   ├── socket_server.py # Listening socket, accept loop
    │   └── connection.py    # One client socket
    ├── http/
    │   ├── request.py       # Streaming request parser
    │   ├── response.py      # Response model and framing
    │   ├── router.py        # Ordered first-match routing
    │   └── status_codes.py  # Status enum
    ├── middleware/
    │   ├── base.py          # Middleware pipeline
    │   ├── logging.py       # Access log
    │   └── compression.py   # gzip / deflate
    └── handlers/
        ├── echo.py          # /, /echo/, /user-agent
        └── files.py         # /files/

=============================================================================
QUICK START
=============================================================================

    from minihttp import ServerConfig, create_app

    server = create_app(ServerConfig(port=4221, directory="/tmp/data"))
    server.run()

Or from a shell:

    python -m minihttp --directory /tmp/data

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig
from .app import create_app

__all__ = ["HTTPServer", "ServerConfig", "create_app", "__version__"]
