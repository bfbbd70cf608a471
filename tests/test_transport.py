"""Tests for synth.transport.http_server: predicate dispatch over ASGI."""

import asyncio
import logging
import socket

import anyio
import pytest

from synth.errors import TransportError
from synth.transport.exchange import HttpRequest, HttpResponse
from synth.transport.http_server import HttpServer
from synth.transport.streams import BODY_BUFFER_CHUNKS


async def _call(
    server: HttpServer,
    method: str = "GET",
    path: str = "/",
    body: bytes = b"",
    scope_type: str = "http",
) -> list[dict]:
    messages: list[dict] = []
    sent = False

    async def receive() -> dict:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        await anyio.sleep_forever()
        return {"type": "http.disconnect"}

    async def send(message: dict) -> None:
        messages.append(message)

    scope = {"type": scope_type, "method": method, "path": path, "headers": []}
    with anyio.fail_after(5):
        await server(scope, receive, send)
    return messages


def _writer(text: str):
    async def handler(req: HttpRequest, res: HttpResponse) -> None:
        res.output_stream.write(text)
        await res.output_stream.close()

    return handler


class TestDispatch:
    async def test_first_matching_predicate_wins(self) -> None:
        server = HttpServer()
        server.add_request_handler(lambda req: req.path == "/a", _writer("first"))
        server.add_request_handler(lambda req: req.path.startswith("/"), _writer("second"))
        messages = await _call(server, path="/a")
        assert messages[-1]["body"] == b"first"
        messages = await _call(server, path="/b")
        assert messages[-1]["body"] == b"second"

    async def test_select_handler(self) -> None:
        server = HttpServer()
        handler = _writer("x")
        server.add_request_handler(lambda req: req.method == "POST", handler)
        request = HttpRequest.from_asgi({"type": "http", "method": "POST", "path": "/", "headers": []})
        assert server.select_handler(request) is handler

    async def test_fallback_is_empty_404(self) -> None:
        messages = await _call(HttpServer())
        assert messages[0]["status"] == 404
        assert messages[-1]["body"] == b""

    async def test_default_handler_setter(self) -> None:
        server = HttpServer()
        handler = _writer("default")
        server.default_request_handler = handler
        assert server.default_request_handler is handler
        messages = await _call(server, path="/anything")
        assert messages[-1]["body"] == b"default"

    async def test_non_http_scope_is_ignored(self) -> None:
        messages = await _call(HttpServer(), scope_type="websocket")
        assert messages == []

    async def test_handler_reads_body(self) -> None:
        server = HttpServer()

        async def echo(req: HttpRequest, res: HttpResponse) -> None:
            res.output_stream.write(await req.input_stream.read())
            await res.output_stream.close()

        server.add_request_handler(lambda req: True, echo)
        messages = await _call(server, method="POST", body=b"payload")
        assert messages[-1]["body"] == b"payload"

    async def test_input_closes_after_dispatch_returns(self) -> None:
        server = HttpServer()
        events: list[str] = []

        async def handler(req: HttpRequest, res: HttpResponse) -> None:
            async def on_closed() -> None:
                events.append("input closed")
                await res.output_stream.close()

            req.input_stream.on_closed = on_closed
            await anyio.sleep(0.01)
            events.append("handler returned")

        server.add_request_handler(lambda req: True, handler)
        await _call(server)
        assert events == ["handler returned", "input closed"]

    async def test_unread_body_is_dropped_not_buffered(self) -> None:
        server = HttpServer()
        requests: list[HttpRequest] = []
        buffered: list[int] = []
        chunks = [
            {"type": "http.request", "body": b"x" * 1024, "more_body": i < 199} for i in range(200)
        ]

        async def receive() -> dict:
            if requests:
                buffered.append(requests[0].input_stream.buffered)
            if chunks:
                return chunks.pop(0)
            await anyio.sleep_forever()
            return {"type": "http.disconnect"}

        async def send(message: dict) -> None:
            pass

        async def ignore_body(req: HttpRequest, res: HttpResponse) -> None:
            requests.append(req)
            await anyio.sleep(0.01)
            await res.output_stream.close()

        server.add_request_handler(lambda req: True, ignore_body)
        scope = {"type": "http", "method": "POST", "path": "/upload", "headers": []}
        with anyio.fail_after(5):
            await server(scope, receive, send)
        assert chunks == []
        assert max(buffered) <= BODY_BUFFER_CHUNKS
        assert requests[0].input_stream.closed


class TestFaults:
    async def test_raw_handler_exception_is_500(self, caplog: pytest.LogCaptureFixture) -> None:
        server = HttpServer()
        errors: list[BaseException] = []
        server.on_error = errors.append

        async def boom(req: HttpRequest, res: HttpResponse) -> None:
            raise RuntimeError("kaboom")

        server.add_request_handler(lambda req: True, boom)
        with caplog.at_level(logging.ERROR, logger="synth.transport"):
            messages = await _call(server, path="/boom")
        assert messages[0]["status"] == 500
        assert messages[-1]["body"] == b"500 Internal server error."
        assert "500 GET /boom" in caplog.text
        assert isinstance(errors[0], RuntimeError)

    async def test_predicate_exception_is_500(self) -> None:
        server = HttpServer()

        def broken(req: HttpRequest) -> bool:
            raise KeyError("predicate")

        server.add_request_handler(broken, _writer("never"))
        messages = await _call(server)
        assert messages[0]["status"] == 500

    async def test_report_error_without_callback(self) -> None:
        HttpServer().report_error(RuntimeError("ignored"))


class TestLifecycle:
    def test_port_before_listen(self) -> None:
        with pytest.raises(TransportError, match="not listening"):
            _ = HttpServer().port

    async def test_wait_closed_before_start(self) -> None:
        await HttpServer().wait_closed()

    async def test_live_request_over_socket(self) -> None:
        server = HttpServer(log_level="warning")
        server.add_request_handler(lambda req: req.path == "/", _writer("Hello, synthesizers!"))
        await server.start("127.0.0.1", 0)
        try:
            port = server.port
            assert port > 0
            reader, writer = await asyncio.open_connection("127.0.0.1", port)
            writer.write(b"GET / HTTP/1.1\r\nHost: localhost\r\nConnection: close\r\n\r\n")
            await writer.drain()
            raw = await asyncio.wait_for(reader.read(), timeout=5)
            writer.close()
            await writer.wait_closed()
        finally:
            server.close()
            await server.wait_closed()

        head, _, body = raw.partition(b"\r\n\r\n")
        assert head.startswith(b"HTTP/1.1 200")
        assert b"content-length: 20" in head.lower()
        assert body == b"Hello, synthesizers!"

    async def test_port_in_use_raises_transport_error(self) -> None:
        with socket.create_server(("127.0.0.1", 0)) as occupied:
            port = occupied.getsockname()[1]
            server = HttpServer(log_level="warning")
            with pytest.raises(TransportError, match=f"Cannot listen on 127.0.0.1:{port}"):
                await server.start("127.0.0.1", port)
        with pytest.raises(TransportError, match="not listening"):
            _ = server.port

    async def test_start_twice(self) -> None:
        server = HttpServer(log_level="warning")
        await server.start("127.0.0.1", 0)
        try:
            with pytest.raises(TransportError, match="already listening"):
                await server.start("127.0.0.1", 0)
        finally:
            server.close()
            await server.wait_closed()
