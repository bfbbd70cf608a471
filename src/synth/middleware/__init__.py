"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, response: Response, next: Next) -> None

Built-in middleware:
    AccessLogMiddleware -- One log line per request on ``synth.access``
    SecurityHeadersMiddleware -- X-Frame-Options, X-Content-Type-Options, Referrer-Policy
"""

from synth.middleware.access_log import AccessLogMiddleware
from synth.middleware.chain import ChainNode, build_chain, run_chain
from synth.middleware.protocol import Middleware, Next
from synth.middleware.security_headers import (
    SecurityHeadersConfig,
    SecurityHeadersMiddleware,
)

__all__ = [
    "AccessLogMiddleware",
    "ChainNode",
    "Middleware",
    "Next",
    "SecurityHeadersConfig",
    "SecurityHeadersMiddleware",
    "build_chain",
    "run_chain",
]
