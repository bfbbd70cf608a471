"""HTTP transport — predicate-dispatched ASGI application served by uvicorn.

The only component that touches raw ASGI directly. For every request it:

1. builds ``HttpRequest`` / ``HttpResponse`` from the scope,
2. pumps the body into ``request.input_stream`` in a background task,
3. evaluates registered ``(predicate, handler)`` pairs in registration
   order and runs the first match, or the default handler,
4. drops any body the handler left unread, then closes the input stream
   once the body has ended,
5. waits for the output stream to close before finishing the ASGI call.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from typing import Any

import anyio
import uvicorn

from synth._internal.asgi import Receive, Scope, Send
from synth._internal.invoke import invoke
from synth._internal.types import ErrorCallback, Predicate, RawHandler
from synth.errors import TransportError
from synth.transport.exchange import HttpRequest, HttpResponse

logger = logging.getLogger("synth.transport")

DEFAULT_BACKLOG = 2048


async def _fallback_handler(request: HttpRequest, response: HttpResponse) -> None:
    response.status_code = 404
    await response.output_stream.close()


class HttpServer:
    """Predicate-based request dispatcher over ASGI.

    Usage::

        transport = HttpServer()
        transport.add_request_handler(lambda req: req.path == "/", hello)
        transport.default_request_handler = not_found
        transport.listen("127.0.0.1", 7000)
    """

    __slots__ = (
        "_default_handler",
        "_handlers",
        "_on_error",
        "_serve_task",
        "_uvicorn",
        "access_log",
        "log_level",
    )

    def __init__(self, *, log_level: str = "info", access_log: bool = False) -> None:
        self._handlers: list[tuple[Predicate, RawHandler]] = []
        self._default_handler: RawHandler = _fallback_handler
        self._on_error: ErrorCallback | None = None
        self._uvicorn: uvicorn.Server | None = None
        self._serve_task: asyncio.Task[None] | None = None
        self.log_level = log_level
        self.access_log = access_log

    # -- Registration --

    def add_request_handler(self, matcher: Predicate, handler: RawHandler) -> None:
        """Register *handler* for requests where ``matcher(request)`` is true.

        Pairs are tried in registration order; the first match wins.
        """
        self._handlers.append((matcher, handler))

    @property
    def default_request_handler(self) -> RawHandler:
        return self._default_handler

    @default_request_handler.setter
    def default_request_handler(self, handler: RawHandler) -> None:
        self._default_handler = handler

    @property
    def on_error(self) -> ErrorCallback | None:
        return self._on_error

    @on_error.setter
    def on_error(self, callback: ErrorCallback | None) -> None:
        self._on_error = callback

    def report_error(self, exc: BaseException) -> None:
        """Hand *exc* to the ``on_error`` callback, if one is set."""
        if self._on_error is None:
            return
        try:
            self._on_error(exc)
        except Exception:
            logger.exception("on_error callback failed")

    # -- Dispatch --

    def select_handler(self, request: HttpRequest) -> RawHandler:
        """Return the first handler whose predicate accepts *request*."""
        for matcher, handler in self._handlers:
            if matcher(request):
                return handler
        return self._default_handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point. Only ``http`` scopes are served."""
        if scope["type"] != "http":
            return

        request = HttpRequest.from_asgi(scope)
        response = HttpResponse(send, request)
        stream = request.input_stream

        async with anyio.create_task_group() as tg:
            tg.start_soon(stream.feed, receive)
            await self._dispatch(request, response)
            stream.discard()
            await stream.wait_received()
            try:
                await stream.close()
            except Exception as exc:
                await self._fail(exc, request, response)

        await response.output_stream.wait_closed()

    async def _dispatch(self, request: HttpRequest, response: HttpResponse) -> None:
        try:
            handler = self.select_handler(request)
            await invoke(handler, request, response)
        except Exception as exc:
            await self._fail(exc, request, response)

    async def _fail(self, exc: Exception, request: HttpRequest, response: HttpResponse) -> None:
        """Last-resort 500 for faults that escaped the handler."""
        logger.exception("500 %s %s", request.method, request.path)
        self.report_error(exc)
        stream = response.output_stream
        if stream.closed:
            return
        if not stream.started:
            response.status_code = 500
            response.headers.set("content-type", "text/plain; charset=UTF-8")
            stream.write("500 Internal server error.")
        await stream.close()

    # -- Lifecycle --

    def _config(self, host: str, port: int, backlog: int | None) -> uvicorn.Config:
        return uvicorn.Config(
            self,
            host=host,
            port=port,
            backlog=backlog or DEFAULT_BACKLOG,
            lifespan="off",
            log_level=self.log_level,
            access_log=self.access_log,
        )

    async def start(
        self,
        host: str = "127.0.0.1",
        port: int = 0,
        backlog: int | None = None,
        *,
        sock: socket.socket | None = None,
    ) -> None:
        """Start serving in the running event loop and return once bound.

        Raises ``TransportError`` when *host*:*port* cannot be bound.
        """
        if self._uvicorn is not None:
            msg = "Transport is already listening."
            raise TransportError(msg)
        if sock is None:
            sock = _bind(host, port, backlog or DEFAULT_BACKLOG)

        server = uvicorn.Server(self._config(host, port, backlog))
        self._uvicorn = server
        self._serve_task = asyncio.create_task(server.serve(sockets=[sock]))
        while not server.started:
            if self._serve_task.done():
                self._uvicorn = None
                self._serve_task.result()
                msg = f"Server on {host}:{port} stopped during startup."
                raise TransportError(msg)
            await anyio.sleep(0.01)
        logger.info("Listening on %s:%d", host, self.port)

    async def wait_closed(self) -> None:
        """Block until the server has shut down."""
        if self._serve_task is None:
            return
        try:
            await self._serve_task
        finally:
            self._serve_task = None
            self._uvicorn = None

    async def serve(
        self,
        host: str = "127.0.0.1",
        port: int = 0,
        backlog: int | None = None,
        *,
        sock: socket.socket | None = None,
    ) -> None:
        await self.start(host, port, backlog, sock=sock)
        await self.wait_closed()

    def listen(self, host: str, port: int, backlog: int | None = None) -> None:
        """Bind *host*:*port* and serve until ``close()`` (blocking)."""
        asyncio.run(self.serve(host, port, backlog))

    def listen_on(self, sock: socket.socket) -> None:
        """Serve on an already bound socket until ``close()`` (blocking)."""
        host, _ = sock.getsockname()[:2]
        asyncio.run(self.serve(host, 0, sock=sock))

    def close(self) -> None:
        """Ask the server to stop accepting connections and shut down."""
        if self._uvicorn is not None:
            logger.info("Closing server")
            self._uvicorn.should_exit = True

    @property
    def port(self) -> int:
        """The bound port. Raises ``TransportError`` when not listening."""
        server = self._uvicorn
        if server is None or not server.servers:
            msg = "Transport is not listening."
            raise TransportError(msg)
        sockets: Any = server.servers[0].sockets
        return sockets[0].getsockname()[1]


def _bind(host: str, port: int, backlog: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    try:
        return socket.create_server((host, port), family=family, backlog=backlog)
    except OSError as exc:
        msg = f"Cannot listen on {host}:{port}: {exc.strerror or exc}"
        raise TransportError(msg) from exc
