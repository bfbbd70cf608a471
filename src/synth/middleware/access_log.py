"""Access log middleware — one log line per request.

Logs ``METHOD path -> status (elapsed ms)`` on the ``synth.access``
logger after the rest of the chain has returned.
"""

import logging
import time

from synth.http.request import Request
from synth.http.response import Response
from synth.middleware.protocol import Next

logger = logging.getLogger("synth.access")


class AccessLogMiddleware:
    """Log every request that passes through the chain.

    Usage::

        server.add_middleware_handler(AccessLogMiddleware())
    """

    __slots__ = ("level",)

    def __init__(self, level: int = logging.INFO) -> None:
        self.level = level

    async def __call__(self, request: Request, response: Response, next: Next) -> None:
        start = time.perf_counter()
        try:
            await next()
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.log(
                self.level,
                "%s %s -> %d (%.1fms)",
                request.method,
                request.uri,
                response.status_code,
                elapsed_ms,
            )
