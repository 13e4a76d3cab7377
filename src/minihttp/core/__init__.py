"""
=============================================================================
CORE NETWORKING
=============================================================================

    socket_server.py   listening socket and accept loop
    connection.py      one client socket: read a request, write a response

Concurrency model: one thread per accepted connection, started by
HTTPServer. Threads share nothing mutable; the only shared object is the
frozen ServerConfig.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = ["SocketServer", "Connection", "ConnectionState"]
