"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) pairs to handler functions.

=============================================================================
ROUTE PATTERNS
=============================================================================

Two kinds of rule exist:

    EXACT    "/user-agent"       matches only "/user-agent"
    PREFIX   "/echo/*text"       matches "/echo/" followed by anything,
                                 captures the remainder as params["text"]

    ┌───────────────────────────┬──────────────────┬────────────────────┐
    │ Request path              │ Pattern          │ Captured params    │
    ├───────────────────────────┼──────────────────┼────────────────────┤
    │ /echo/abc                 │ /echo/*text      │ {"text": "abc"}    │
    │ /echo/a/b                 │ /echo/*text      │ {"text": "a/b"}    │
    │ /echo/                    │ /echo/*text      │ {"text": ""}       │
    │ /echo                     │ /echo/*text      │ (no match)         │
    │ /files/notes.txt          │ /files/*filename │ {"filename": ...}  │
    └───────────────────────────┴──────────────────┴────────────────────┘

Paths are matched exactly as sent: no trailing-slash stripping, no
percent-decoding.

=============================================================================
ORDERING
=============================================================================

Routes are tried in registration order and the first match wins. A request
that matches nothing, whatever its method, gets 404 Not Found. There is no
405: "POST /" is simply an unrouted request.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional
import logging
import re

from .request import HTTPRequest
from .response import HTTPResponse, not_found


logger = logging.getLogger(__name__)

# Handler: A function that takes a request and returns a response
Handler = Callable[[HTTPRequest], HTTPResponse]


class RouteType(Enum):
    """How a route's pattern is matched against the path."""
    EXACT = "exact"     # /user-agent - whole path must be equal
    PREFIX = "prefix"   # /echo/*text - path must start with /echo/


@dataclass
class Route:
    """
    A registered route.

        Route(
            path="/files/*filename",
            method="POST",
            handler=files.write,
            type=RouteType.PREFIX,
            _pattern=re.compile(r"^/files/(?P<filename>.*)$"),
        )
    """
    path: str                        # URL pattern
    method: Optional[str]            # HTTP method (None = any method)
    handler: Handler
    type: RouteType = RouteType.EXACT

    _pattern: Optional[re.Pattern] = field(default=None, repr=False)
    _param_names: List[str] = field(default_factory=list, repr=False)


@dataclass
class RouteMatch:
    """A matched route plus the parameters captured from the path."""
    route: Route
    params: Dict[str, str]


class Router:
    """
    Ordered, first-match-wins router.

        router = Router()

        @router.get("/echo/*text")
        def echo(request):
            return ok(request.path_params["text"], TEXT_PLAIN)

        response = router.handle(request)
    """

    def __init__(self):
        self._routes: List[Route] = []

    @property
    def routes(self) -> List[Route]:
        return list(self._routes)

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: Optional[str] = None,
    ) -> Route:
        """
        Register a route at the end of the match order.

        Args:
            path: Exact path, or a prefix ending in "/*name".
            handler: Handler function that takes request, returns response.
            method: HTTP method (None for any method).
        """
        pattern, param_names, route_type = self._compile_pattern(path)

        route = Route(
            path=path,
            method=method.upper() if method else None,
            handler=handler,
            type=route_type,
            _pattern=pattern,
            _param_names=param_names,
        )
        self._routes.append(route)
        logger.debug(f"Registered route {route.method or '*'} {path} ({route_type.value})")
        return route

    def _compile_pattern(self, path: str) -> tuple[re.Pattern, List[str], RouteType]:
        """
        Compile a route pattern into an anchored regex.

            "/"               → ^/$
            "/user-agent"     → ^/user\\-agent$
            "/echo/*text"     → ^/echo/(?P<text>.*)$

        A "*name" segment is only allowed last; it captures the rest of the
        path including any further slashes.
        """
        if not path.startswith("/"):
            raise ValueError(f"Route path must start with '/': {path!r}")

        prefix, star, name = path.rpartition("/*")
        if not star:
            return re.compile("^" + re.escape(path) + "$"), [], RouteType.EXACT

        name = name or "wildcard"
        if not name.isidentifier():
            raise ValueError(f"Invalid wildcard name in route: {path!r}")

        regex = "^" + re.escape(prefix + "/") + f"(?P<{name}>.*)$"
        return re.compile(regex, re.DOTALL), [name], RouteType.PREFIX

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route accepting this method and path.

        Returns:
            RouteMatch if found, None otherwise.
        """
        for route in self._routes:
            if route.method and route.method != method.upper():
                continue

            match = route._pattern.match(path)
            if match:
                return RouteMatch(route=route, params=match.groupdict())

        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler.

        Unmatched requests fall through to an empty 404 response.
        """
        match = self.match(request.method, request.path)
        if match is None:
            logger.debug(f"No route for {request.method} {request.path}")
            return not_found()

        request.path_params = match.params
        return match.route.handler(request)

    # =========================================================================
    # DECORATOR-STYLE ROUTE REGISTRATION
    # =========================================================================

    def route(self, path: str, method: Optional[str] = None) -> Callable[[Handler], Handler]:
        """
        Decorator for registering routes.

            @router.route("/files/*filename", method="POST")
            def write_file(request):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method)
            return handler  # Unchanged, so decorators stack
        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(path, "GET")

    def post(self, path: str) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route(path, "POST")
