"""Tests for synth.transport.streams: request input and response output."""

import anyio
import pytest

from synth.errors import HeadersSentError, StreamClosedError
from synth.transport.exchange import HttpRequest, HttpResponse
from synth.transport.streams import InputStream


def _receiver(*messages: dict):
    pending = list(messages)

    async def receive() -> dict:
        if pending:
            return pending.pop(0)
        await anyio.sleep_forever()
        return {"type": "http.disconnect"}

    return receive


def _body(data: bytes, more: bool = False) -> dict:
    return {"type": "http.request", "body": data, "more_body": more}


def _response(status: int = 200) -> tuple[HttpResponse, list[dict]]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    request = HttpRequest.from_asgi({"type": "http", "method": "GET", "path": "/", "headers": []})
    response = HttpResponse(send, request)
    response.status_code = status
    return response, messages


class TestInputStream:
    async def test_read_whole_body(self) -> None:
        stream = InputStream()
        await stream.feed(_receiver(_body(b"hello ", True), _body(b"world")))
        assert await stream.read() == b"hello world"

    async def test_async_iteration_yields_chunks(self) -> None:
        stream = InputStream()
        await stream.feed(_receiver(_body(b"a", True), _body(b"b", True), _body(b"c")))
        assert [chunk async for chunk in stream] == [b"a", b"b", b"c"]

    async def test_empty_body(self) -> None:
        stream = InputStream()
        await stream.feed(_receiver(_body(b"")))
        assert await stream.read() == b""

    async def test_reader_waits_for_feed(self) -> None:
        stream = InputStream()
        result: list[bytes] = []

        async def reader() -> None:
            result.append(await stream.read())

        async with anyio.create_task_group() as tg:
            tg.start_soon(reader)
            await anyio.sleep(0)
            tg.start_soon(stream.feed, _receiver(_body(b"late", True), _body(b"!")))
        assert result == [b"late!"]

    async def test_disconnect(self) -> None:
        stream = InputStream()
        await stream.feed(_receiver(_body(b"part", True), {"type": "http.disconnect"}))
        assert stream.disconnected
        assert await stream.read() == b"part"

    async def test_wait_received(self) -> None:
        stream = InputStream()
        await stream.feed(_receiver(_body(b"x")))
        with anyio.fail_after(1):
            await stream.wait_received()

    async def test_on_closed_runs_once(self) -> None:
        stream = InputStream()
        calls: list[str] = []
        stream.on_closed = lambda: calls.append("closed")
        await stream.close()
        await stream.close()
        assert stream.closed
        assert calls == ["closed"]

    async def test_async_on_closed(self) -> None:
        stream = InputStream()
        calls: list[str] = []

        async def on_closed() -> None:
            calls.append("closed")

        stream.on_closed = on_closed
        assert stream.on_closed is on_closed
        await stream.close()
        assert calls == ["closed"]

    async def test_read_after_close_is_empty(self) -> None:
        stream = InputStream()
        await stream.feed(_receiver(_body(b"unread")))
        await stream.close()
        assert await stream.read() == b""

    async def test_buffer_is_bounded(self) -> None:
        stream = InputStream(max_buffered=2)
        chunks = [_body(b"c", True) for _ in range(9)] + [_body(b"end")]
        async with anyio.create_task_group() as tg:
            tg.start_soon(stream.feed, _receiver(*chunks))
            await anyio.wait_all_tasks_blocked()
            assert stream.buffered == 2
            assert await stream.read() == b"c" * 9 + b"end"

    async def test_discard_drains_remaining_body(self) -> None:
        stream = InputStream(max_buffered=2)
        pending = [_body(b"c", True) for _ in range(50)] + [_body(b"end")]
        seen: list[int] = []

        async def receive() -> dict:
            seen.append(stream.buffered)
            return pending.pop(0)

        async with anyio.create_task_group() as tg:
            tg.start_soon(stream.feed, receive)
            await anyio.wait_all_tasks_blocked()
            stream.discard()
            with anyio.fail_after(1):
                await stream.wait_received()
        assert pending == []
        assert max(seen) <= 2
        assert await stream.read() == b""

    async def test_pipe(self) -> None:
        stream = InputStream()
        await stream.feed(_receiver(_body(b"user", True), _body(b"name=ada")))
        response, messages = _response()
        await stream.pipe(response.output_stream)
        assert response.output_stream.closed
        assert b"".join(m.get("body", b"") for m in messages[1:]) == b"username=ada"
        assert messages[-1]["more_body"] is False

    async def test_pipe_without_close(self) -> None:
        stream = InputStream()
        await stream.feed(_receiver(_body(b"x")))
        response, _ = _response()
        await stream.pipe(response.output_stream, close=False)
        assert not response.output_stream.closed


class TestOutputStream:
    async def test_write_only_buffers(self) -> None:
        response, messages = _response()
        response.output_stream.write(b"hello")
        assert messages == []
        assert not response.output_stream.started

    async def test_close_sends_exact_content_length(self) -> None:
        response, messages = _response()
        response.output_stream.write("héllo")
        await response.output_stream.close()
        start, body = messages
        assert start["type"] == "http.response.start"
        assert start["status"] == 200
        assert (b"content-length", b"6") in start["headers"]
        assert body == {"type": "http.response.body", "body": "héllo".encode(), "more_body": False}

    async def test_close_is_idempotent(self) -> None:
        response, messages = _response()
        response.output_stream.write(b"once")
        await response.output_stream.close()
        await response.output_stream.close()
        finals = [m for m in messages if m["type"] == "http.response.body" and not m["more_body"]]
        assert len(finals) == 1

    async def test_flush_streams_chunks(self) -> None:
        response, messages = _response()
        stream = response.output_stream
        stream.write(b"one")
        await stream.flush()
        stream.write(b"two")
        await stream.flush()
        await stream.close()
        assert stream.started
        assert messages[0]["type"] == "http.response.start"
        assert all(name != b"content-length" for name, _ in messages[0]["headers"])
        assert [(m["body"], m["more_body"]) for m in messages[1:]] == [
            (b"one", True),
            (b"two", True),
            (b"", False),
        ]

    async def test_empty_flush_sends_only_head(self) -> None:
        response, messages = _response()
        await response.output_stream.flush()
        assert [m["type"] for m in messages] == ["http.response.start"]

    async def test_write_after_close(self) -> None:
        response, _ = _response()
        await response.output_stream.close()
        with pytest.raises(StreamClosedError):
            response.output_stream.write(b"late")

    async def test_flush_after_close(self) -> None:
        response, _ = _response()
        await response.output_stream.close()
        with pytest.raises(StreamClosedError):
            await response.output_stream.flush()

    @pytest.mark.parametrize("status", [204, 304])
    async def test_bodiless_status_drops_body(self, status: int) -> None:
        response, messages = _response(status)
        response.output_stream.write(b"unexpected-body")
        await response.output_stream.close()
        assert all(name != b"content-length" for name, _ in messages[0]["headers"])
        assert messages[1]["body"] == b""

    async def test_head_locked_after_start(self) -> None:
        response, _ = _response()
        await response.output_stream.flush()
        with pytest.raises(HeadersSentError):
            response.headers.set("x-late", "1")
        with pytest.raises(HeadersSentError):
            response.status_code = 500
        with pytest.raises(HeadersSentError):
            response.reason_phrase = "Nope"

    async def test_wait_closed(self) -> None:
        response, _ = _response()
        stream = response.output_stream
        async with anyio.create_task_group() as tg:
            tg.start_soon(stream.wait_closed)
            await anyio.sleep(0)
            await stream.close()
        assert stream.closed
