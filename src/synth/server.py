"""Synth server facade.

Mutable during setup (routes, middleware, handlers).
Frozen at runtime when ``listen()`` is called or the first request
reaches a route.
"""

import logging
import socket
import threading
from typing import Any

from synth._internal.asgi import Receive, Scope, Send
from synth._internal.types import ErrorCallback, Handler, Predicate, RawHandler
from synth.config import ServerConfig
from synth.errors import ConfigurationError
from synth.pipeline.errors import not_found_handler
from synth.pipeline.handler import handle_request
from synth.routing.route import Route
from synth.routing.router import Router
from synth.transport.exchange import HttpRequest, HttpResponse
from synth.transport.http_server import HttpServer

logger = logging.getLogger("synth.server")


class Server:
    """The synth server.

    Wraps a transport ``HttpServer``: routes become predicate handlers on
    the transport, and every matched request runs through the registered
    middleware before its route handler.

    Usage::

        server = Server()

        @server.route("GET", "/person/:name")
        def greet(req, res):
            res.write(f"Hello, {req.path.split('/')[2]}")

        server.listen("127.0.0.1", 7000)

    Thread safety:
        Setup is single-threaded (decorators at import time). The freeze
        transition uses a Lock + double-check so exactly one caller turns
        the middleware list into its runtime tuple.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_list",
        "_router",
        "config",
        "transport",
    )

    def __init__(
        self,
        transport: HttpServer | None = None,
        config: ServerConfig | None = None,
    ) -> None:
        self.config: ServerConfig = config or ServerConfig()
        self.transport: HttpServer = transport or HttpServer(
            log_level=self.config.log_level,
            access_log=self.config.access_log,
        )
        self.transport.default_request_handler = not_found_handler

        self._middleware_list: list[Handler] = []
        self._middleware: tuple[Handler, ...] = ()
        self._router = Router()

        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Handlers --

    def create_handler(self, handler: Handler) -> RawHandler:
        """Wrap a route handler into a transport handler.

        The returned callable wraps the native request/response, closes
        the response once the request input closes, and runs the
        middleware chain ending in *handler*.
        """

        async def transport_handler(req: HttpRequest, res: HttpResponse) -> None:
            self._ensure_frozen()
            await handle_request(
                req,
                res,
                middleware=self._middleware,
                handler=handler,
                report_error=self.transport.report_error,
            )

        transport_handler.__name__ = getattr(handler, "__name__", "transport_handler")
        return transport_handler

    def add_middleware_handler(self, middleware: Handler) -> None:
        """Add a middleware to the chain. Runs in registration order."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    @property
    def middleware(self) -> tuple[Handler, ...]:
        """Registered middleware, in execution order."""
        if self._frozen:
            return self._middleware
        return tuple(self._middleware_list)

    # -- Routes --

    def route(
        self,
        method: str,
        path: str,
        handler: Handler | None = None,
    ) -> Any:
        """Declare a route, directly or as a decorator.

        Usage::

            server.route("GET", "/hey", lambda req, res: res.write("yo"))

            @server.route("POST", "/login")
            def login(req, res):
                return req.input_stream.pipe(res.output_stream)

        The method is upper-cased; the path is matched as declared.
        """
        if handler is not None:
            self.add_route(Route(method.upper(), path, handler))
            return handler

        def decorator(func: Handler) -> Handler:
            self.add_route(Route(method.upper(), path, func))
            return func

        return decorator

    def add_route(self, route: Route) -> None:
        """Register *route* behind every route declared before it."""
        self._check_not_frozen()
        self._router.add_route(self, route)

    @property
    def routes(self) -> list[Route]:
        return self._router.routes

    # -- Transport pass-through --

    def add_request_handler(self, matcher: Predicate, handler: RawHandler) -> None:
        self._check_not_frozen()
        self.transport.add_request_handler(matcher, handler)

    @property
    def default_request_handler(self) -> RawHandler:
        return self.transport.default_request_handler

    @default_request_handler.setter
    def default_request_handler(self, handler: RawHandler) -> None:
        self.transport.default_request_handler = handler

    @property
    def on_error(self) -> ErrorCallback | None:
        return self.transport.on_error

    @on_error.setter
    def on_error(self, callback: ErrorCallback | None) -> None:
        self.transport.on_error = callback

    # -- Lifecycle --

    def listen(
        self,
        host: str | None = None,
        port: int | None = None,
        backlog: int | None = None,
    ) -> None:
        """Freeze and serve on *host*:*port* until ``close()`` (blocking).

        Args:
            host: Override bind host.
            port: Override bind port.
            backlog: Override the listen backlog.
        """
        self._ensure_frozen()
        _host = host or self.config.host
        _port = self.config.port if port is None else port
        _backlog = backlog or self.config.backlog
        logger.info("Serving on %s:%d", _host, _port)
        self.transport.listen(_host, _port, _backlog)

    def listen_on(self, sock: socket.socket) -> None:
        """Freeze and serve on an already bound socket (blocking)."""
        self._ensure_frozen()
        self.transport.listen_on(sock)

    async def start(
        self,
        host: str | None = None,
        port: int | None = None,
        backlog: int | None = None,
    ) -> None:
        """Freeze and start serving in the running event loop.

        Returns once the socket is bound; pass ``port=0`` for an
        ephemeral port and read it back from ``port``.
        """
        self._ensure_frozen()
        await self.transport.start(
            host or self.config.host,
            self.config.port if port is None else port,
            backlog or self.config.backlog,
        )

    async def wait_closed(self) -> None:
        await self.transport.wait_closed()

    def close(self) -> None:
        self.transport.close()

    @property
    def port(self) -> int:
        return self.transport.port

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point. Delegates to the transport."""
        if scope["type"] == "http":
            self._ensure_frozen()
        await self.transport(scope, receive, send)

    # -- Internal --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._middleware = tuple(self._middleware_list)
            self._frozen = True
            logger.debug(
                "Frozen with %d middleware and %d routes",
                len(self._middleware),
                len(self._router.routes),
            )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the server after it has started serving requests. "
                "Register routes and middleware before calling listen()."
            )
            raise ConfigurationError(msg)
