"""Router — binds declared routes to the transport's predicate registry.

There is no lookup structure of its own: each route becomes one
``(predicate, handler)`` pair on the server, and the transport tries the
pairs in registration order. Overlapping routes are not detected; the
one declared first wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from synth.routing.matcher import matches
from synth.routing.route import Route

if TYPE_CHECKING:
    from synth.server import Server
    from synth.transport.exchange import HttpRequest


class Router:
    """Registers routes with a server in declaration order.

    Usage::

        router = Router()
        router.add_route(server, Route("GET", "/person/:name", greet))
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: list[Route] = []

    def add_route(self, server: Server, route: Route) -> None:
        """Wrap *route*'s handler in a middleware chain and register it."""
        handler = server.create_handler(route.handler)

        def predicate(request: HttpRequest) -> bool:
            return matches(request.method, request.path, route)

        server.add_request_handler(predicate, handler)
        self._routes.append(route)

    @property
    def routes(self) -> list[Route]:
        """Registered routes, in declaration order."""
        return list(self._routes)
