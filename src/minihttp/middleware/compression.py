"""
=============================================================================
RESPONSE COMPRESSION
=============================================================================

Content negotiation for the response body.

=============================================================================
NEGOTIATION
=============================================================================

The client lists the codings it can decode:

    Accept-Encoding: invalid-1, deflate, gzip

The server supports two, in this order of preference:

    SUPPORTED_ENCODINGS = ("gzip", "deflate")

The chosen coding is the first supported one the client also sent:

    ┌─────────────────────────────────┬───────────────┐
    │ Accept-Encoding                 │ Negotiated    │
    ├─────────────────────────────────┼───────────────┤
    │ gzip                            │ gzip          │
    │ deflate                         │ deflate       │
    │ deflate, gzip                   │ gzip          │
    │ invalid-1, invalid-2            │ (none)        │
    │ (absent)                        │ (none)        │
    │ gzip;q=0                        │ (none)        │
    └─────────────────────────────────┴───────────────┘

Tokens are compared literally. Quality values are not interpreted, so a
token carrying ";q=..." never matches.

=============================================================================
ENCODINGS
=============================================================================

    gzip     RFC 1952 container (header, deflate data, CRC32 trailer)
             → gzip.compress()
    deflate  RFC 1950 zlib stream (what HTTP calls "deflate")
             → zlib.compress()

=============================================================================
"""

import gzip
import zlib
from typing import Iterable, Optional

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


# Server preference order
SUPPORTED_ENCODINGS = ("gzip", "deflate")


def negotiate_encoding(accepted: Iterable[str]) -> Optional[str]:
    """
    Pick the response coding for a client's Accept-Encoding tokens.

    Args:
        accepted: Tokens from the Accept-Encoding header.

    Returns:
        "gzip", "deflate", or None when nothing supported was offered.
    """
    offered = set(accepted)
    for encoding in SUPPORTED_ENCODINGS:
        if encoding in offered:
            return encoding
    return None


def compress(body: bytes, encoding: str, level: int = 6) -> bytes:
    """
    Compress a body with one of the SUPPORTED_ENCODINGS.

    The gzip header's mtime is fixed at 0 so identical bodies compress to
    identical bytes.

    Raises:
        ValueError: For an unsupported encoding.
    """
    if encoding == "gzip":
        return gzip.compress(body, compresslevel=level, mtime=0)
    if encoding == "deflate":
        return zlib.compress(body, level)
    raise ValueError(f"Unsupported encoding: {encoding}")


class CompressionMiddleware(Middleware):
    """
    Response compression middleware.

    =========================================================================
    HOW IT WORKS
    =========================================================================

    1. Negotiate a coding from request.accept_encoding
    2. Call the next handler to get the response
    3. If a coding was negotiated and the response carries an entity:
       - compress the body
       - put Content-Encoding first in the headers

    Content-Length is left to the encoder, which computes it from the
    compressed body.

    Responses without an entity (root, 201, 404) pass through untouched,
    as does any response that already has a Content-Encoding.

    =========================================================================
    """

    def __init__(self, level: int = 6):
        """
        Args:
            level: Compression level (0-9). 6 is the zlib default.
        """
        self.level = level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        encoding = negotiate_encoding(request.accept_encoding)

        response = next(request)

        if encoding is None:
            return response
        if not response.has_entity or "Content-Encoding" in response.headers:
            return response

        response.body = compress(response.body, encoding, self.level)

        # Content-Encoding goes ahead of Content-Type on the wire
        response.headers = {"Content-Encoding": encoding, **response.headers}

        return response
