"""Per-request middleware chain.

For middleware ``[M1, M2, M3]`` and route handler ``H`` a request gets a
fresh linked sequence::

    node(M1) -> node(M2) -> node(M3) -> terminal(H)

Execution starts at the head. Each non-terminal node hands its
middleware a ``next`` that executes the successor. The terminal node
calls ``H(request, response)`` and has no successor.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from synth._internal.invoke import invoke
from synth._internal.types import Handler
from synth.http.request import Request
from synth.http.response import Response

logger = logging.getLogger("synth.middleware")


class ChainNode:
    """One request-scoped execution unit.

    Wraps a single middleware, or the route handler when ``next_node``
    is ``None``.
    """

    __slots__ = ("_advanced", "handler", "next_node", "request", "response")

    def __init__(
        self,
        request: Request,
        response: Response,
        handler: Handler,
        next_node: ChainNode | None = None,
    ) -> None:
        self.request = request
        self.response = response
        self.handler = handler
        self.next_node = next_node
        self._advanced = False

    @property
    def is_terminal(self) -> bool:
        return self.next_node is None

    async def execute(self) -> None:
        if self.next_node is None:
            await invoke(self.handler, self.request, self.response)
            return
        await invoke(self.handler, self.request, self.response, self.advance)

    async def advance(self) -> None:
        """Run the successor. Only the first call has an effect."""
        if self._advanced:
            logger.warning(
                "%s called next() more than once for %s %s",
                _handler_name(self.handler),
                self.request.method,
                self.request.path,
            )
            return
        self._advanced = True
        assert self.next_node is not None
        await self.next_node.execute()


def _handler_name(handler: Any) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


def build_chain(
    request: Request,
    response: Response,
    middleware: Sequence[Handler],
    handler: Handler,
) -> ChainNode:
    """Link one node per middleware, ending in a terminal node for *handler*."""
    node = ChainNode(request, response, handler)
    for mw in reversed(middleware):
        node = ChainNode(request, response, mw, node)
    return node


async def run_chain(
    request: Request,
    response: Response,
    middleware: Sequence[Handler],
    handler: Handler,
) -> None:
    """Run *middleware* in order, then *handler*.

    With no middleware the handler is called directly.
    """
    if not middleware:
        await invoke(handler, request, response)
        return
    await build_chain(request, response, middleware, handler).execute()
