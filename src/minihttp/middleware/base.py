"""
=============================================================================
MIDDLEWARE BASE CLASSES
=============================================================================

Middleware wraps the router so that concerns every request shares (access
logging, response compression) live outside the endpoint handlers.

    ┌─────────────────────────────────────────────────────────────┐
    │  LoggingMiddleware                                          │
    │  ┌───────────────────────────────────────────────────────┐  │
    │  │  CompressionMiddleware                                │  │
    │  │  ┌─────────────────────────────────────────────────┐  │  │
    │  │  │              router.handle                      │  │  │
    │  │  └─────────────────────────────────────────────────┘  │  │
    │  └───────────────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────────────┘

The request flows inward, the response flows back outward: compression
sees the handler's response first, logging sees the final (compressed)
response last.

=============================================================================
"""

from abc import ABC, abstractmethod
from functools import partial
from typing import Callable, Iterator, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# Whatever sits one layer further in: another middleware or the router.
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    One layer around the router.

        class Timing(Middleware):
            def __call__(self, request, next):
                response = next(request)   # inner layers run here
                return response

    Returning without calling next() answers the request from this layer.
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """
        Args:
            request: Parsed request.
            next: Callable running the remaining layers.

        Returns:
            The response to send outward.
        """

    @property
    def name(self) -> str:
        return type(self).__name__


class MiddlewarePipeline:
    """
    Ordered middleware stack.

        pipeline = MiddlewarePipeline()
        pipeline.add(LoggingMiddleware()).add(CompressionMiddleware())
        handler = pipeline.wrap(router.handle)

    The first layer added is the outermost one.
    """

    def __init__(self):
        self._layers: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append a layer inside the existing ones. Returns self."""
        self._layers.append(middleware)
        logger.debug(f"Middleware layer {len(self._layers)}: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Build the call chain around `handler`.

        Layers are bound innermost first, so [Logging, Compression] yields
        Logging(request, Compression(request, handler)).
        """
        chain = handler
        for layer in reversed(self._layers):
            chain = partial(_invoke, layer, chain)
        return chain

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self._layers)


def _invoke(layer: Middleware, next: NextHandler, request: HTTPRequest) -> HTTPResponse:
    return layer(request, next)
