"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, response: Response, next: Next) -> None: ...

No base class required. The server checks the shape, not the lineage.

``next`` continues the chain. A middleware that does not call it ends
the request there (for example after writing a 401). Sync middleware
continue by returning ``next()``::

    def tag(request, response, next):
        response.headers.set("X-Tag", "synth")
        return next()
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeAlias

from synth.http.request import Request
from synth.http.response import Response

# Continuation to the next chain node
Next: TypeAlias = Callable[[], Awaitable[None]]


class Middleware(Protocol):
    """Protocol for synth middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, response: Response, next: Next) -> None:
            start = time.monotonic()
            await next()
            logger.info("took %.3fs", time.monotonic() - start)

        # Class middleware
        class RequireToken:
            async def __call__(self, request: Request, response: Response, next: Next) -> None:
                ...
    """

    def __call__(self, request: Request, response: Response, next: Next) -> Any: ...
