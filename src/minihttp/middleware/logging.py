"""
=============================================================================
ACCESS LOGGING
=============================================================================

One log line per request, in a trimmed Apache-style format:

    127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "GET /echo/abc" 200 23 gzip 0.12ms
                                                              │   │   │
                                             status ──────────┘   │   │
                                             bytes on the wire ───┘   │
                                             Content-Encoding, or "-" ┘

The middleware never touches the response: the wire framing this server
produces must stay byte-exact, so there is no X-Request-ID header.

Configure the logger independently of the rest of the package:

    logging.getLogger("minihttp.access").setLevel(logging.WARNING)

=============================================================================
"""

from dataclasses import dataclass
import logging
import time

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("minihttp.access")


@dataclass
class AccessRecord:
    """What one served request looked like."""
    client_ip: str
    method: str
    path: str
    status: int
    body_bytes: int
    encoding: str
    elapsed_ms: float
    when: str

    @classmethod
    def capture(cls, request: HTTPRequest, response: HTTPResponse, started: float) -> "AccessRecord":
        return cls(
            client_ip=request.client_address[0] or "-",
            method=request.method,
            path=request.path,
            status=int(response.status),
            body_bytes=len(response.body),
            encoding=response.headers.get("Content-Encoding", "-"),
            elapsed_ms=(time.perf_counter() - started) * 1000,
            when=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

    def format(self) -> str:
        return (
            f'{self.client_ip} - - [{self.when}] "{self.method} {self.path}" '
            f'{self.status} {self.body_bytes} {self.encoding} {self.elapsed_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Access log middleware.

    Goes first in the pipeline, so it records the final (possibly
    compressed) response. A failing handler leaves no access line here;
    HTTPServer.handle logs it with the traceback.
    """

    def __init__(self, log_level: int = logging.INFO):
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        started = time.perf_counter()

        response = next(request)

        logger.log(self.log_level, AccessRecord.capture(request, response, started).format())
        return response
