"""
=============================================================================
MIDDLEWARE
=============================================================================

Cross-cutting request/response processing that wraps the router:

    base.py          Middleware ABC and MiddlewarePipeline
    logging.py       access log line per request
    compression.py   Accept-Encoding negotiation, gzip/deflate bodies

=============================================================================
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .logging import LoggingMiddleware
from .compression import (
    CompressionMiddleware,
    SUPPORTED_ENCODINGS,
    negotiate_encoding,
    compress,
)

__all__ = [
    # Base classes
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",

    # Built-in middleware
    "LoggingMiddleware",
    "CompressionMiddleware",

    # Negotiation helpers
    "SUPPORTED_ENCODINGS",
    "negotiate_encoding",
    "compress",
]
