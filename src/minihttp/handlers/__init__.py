"""
=============================================================================
ENDPOINT HANDLERS
=============================================================================

A handler takes an HTTPRequest and returns an HTTPResponse:

    def echo(request: HTTPRequest) -> HTTPResponse:
        return ok(request.path_params["text"], TEXT_PLAIN)

    echo.py    root, echo, user-agent
    files.py   FileHandler.read / FileHandler.write

Handlers never raise for expected failures; a missing file is a 404
response, not an exception.

=============================================================================
"""

from .echo import root, echo, user_agent
from .files import FileHandler

__all__ = [
    "root",
    "echo",
    "user_agent",
    "FileHandler",
]
