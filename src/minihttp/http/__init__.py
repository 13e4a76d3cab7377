"""
=============================================================================
HTTP PROTOCOL ENGINE
=============================================================================

Everything between "bytes arrived" and "bytes to send":

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   raw bytes ──► RequestParser ──► HTTPRequest                        │
    │                                        │                             │
    │                                        ▼                             │
    │                                     Router ──► handler               │
    │                                                   │                  │
    │                                                   ▼                  │
    │   wire bytes ◄── HTTPResponse.to_bytes() ◄── HTTPResponse            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    request.py       streaming request parser
    response.py      response model, builder and wire encoder
    router.py        ordered exact/prefix routing
    status_codes.py  status codes and reason phrases

=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError, ParserState, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    TEXT_PLAIN,
    OCTET_STREAM,
    ok,
    created,
    not_found,
    internal_error,
    error_response,
)
from .router import Router, Route, RouteMatch, RouteType
from .status_codes import HTTPStatus

__all__ = [
    # Request
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "ParserState",
    "parse_request",

    # Response
    "HTTPResponse",
    "ResponseBuilder",
    "TEXT_PLAIN",
    "OCTET_STREAM",
    "ok",
    "created",
    "not_found",
    "internal_error",
    "error_response",

    # Routing
    "Router",
    "Route",
    "RouteMatch",
    "RouteType",

    # Status
    "HTTPStatus",
]
