"""
Reflection endpoints: root, echo and user-agent.

    GET /               → 200, no body
    GET /echo/<text>    → 200, text/plain, body = <text> as sent
    GET /user-agent     → 200, text/plain, body = User-Agent header
"""

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, TEXT_PLAIN, ok


def root(request: HTTPRequest) -> HTTPResponse:
    """Bare 200 with no headers and no body."""
    return ok()


def echo(request: HTTPRequest) -> HTTPResponse:
    """
    Echo the captured path suffix back verbatim.

    The suffix is not percent-decoded: /echo/a%20b answers "a%20b".
    """
    return ok(request.path_params.get("text", ""), TEXT_PLAIN)


def user_agent(request: HTTPRequest) -> HTTPResponse:
    # Empty body (but still text/plain) when the header was not sent
    return ok(request.user_agent, TEXT_PLAIN)
