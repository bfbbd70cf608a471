"""Request input stream and response output stream.

The input stream is fed by the transport from ASGI ``receive()`` while
the handler runs; handlers read it with ``async for`` or ``read()``.
It reports closure once through its ``on_closed`` callback.

The output stream buffers writes and translates flush/close into ASGI
``send()`` messages. Closing is idempotent.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from typing import Any

import anyio

from synth._internal.asgi import Receive, Send
from synth._internal.invoke import invoke
from synth.errors import StreamClosedError
from synth.transport.sender import body_allowed, send_body, send_head

# Produces (status, raw headers) and locks the response head
HeadFactory = Callable[[], tuple[int, list[tuple[bytes, bytes]]]]

# Body chunks held before the feeder waits for the handler to read
BODY_BUFFER_CHUNKS = 16


class InputStream:
    """Request body as a stream of byte chunks.

    Lifecycle:

    1. The transport calls ``feed(receive)`` in a background task. Chunks
       are buffered until read, at most ``max_buffered`` at a time.
    2. Once the body has been fully received (or the client went away)
       ``received`` is set.
    3. After the dispatch step returned the transport calls ``discard()``:
       whatever is still arriving is read and dropped.
    4. The transport calls ``close()`` once the body has ended.
       The ``on_closed`` callback, if any, runs exactly once.
    """

    __slots__ = (
        "_chunks_in",
        "_chunks_out",
        "_closed",
        "_discarding",
        "_disconnected",
        "_on_closed",
        "_received",
    )

    def __init__(self, max_buffered: int = BODY_BUFFER_CHUNKS) -> None:
        self._chunks_in, self._chunks_out = anyio.create_memory_object_stream[bytes](max_buffered)
        self._received = anyio.Event()
        self._closed = False
        self._disconnected = False
        self._discarding = False
        self._on_closed: Callable[[], Any] | None = None

    # -- Properties --

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def disconnected(self) -> bool:
        """True if the client disconnected before the body completed."""
        return self._disconnected

    @property
    def buffered(self) -> int:
        """Chunks received but not yet read."""
        return self._chunks_in.statistics().current_buffer_used

    @property
    def on_closed(self) -> Callable[[], Any] | None:
        return self._on_closed

    @on_closed.setter
    def on_closed(self, callback: Callable[[], Any] | None) -> None:
        """Set the zero-argument callback run when the stream closes.

        The callback may be sync or async. Setting it replaces any
        previous callback.
        """
        self._on_closed = callback

    # -- Reading --

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.chunks()

    async def chunks(self) -> AsyncIterator[bytes]:
        """Yield body chunks as they arrive, ending with the body."""
        try:
            async for chunk in self._chunks_out:
                yield chunk
        except anyio.ClosedResourceError:
            # Closed by the transport; unread body is dropped.
            return

    async def read(self) -> bytes:
        """Read the rest of the body."""
        return b"".join([chunk async for chunk in self.chunks()])

    async def pipe(self, output: OutputStream, *, close: bool = True) -> None:
        """Copy every chunk into *output*, flushing as it goes.

        Closes *output* at the end unless ``close=False``.
        """
        async for chunk in self.chunks():
            output.write(chunk)
            await output.flush()
        if close:
            await output.close()

    # -- Transport side --

    async def feed(self, receive: Receive) -> None:
        """Pump ASGI ``http.request`` messages into the buffer."""
        try:
            while True:
                message = await receive()
                if message["type"] == "http.disconnect":
                    self._disconnected = True
                    break
                body = message.get("body", b"")
                if body and not self._discarding:
                    try:
                        await self._chunks_in.send(bytes(body))
                    except (anyio.BrokenResourceError, anyio.ClosedResourceError):
                        self._discarding = True
                if not message.get("more_body", False):
                    break
        finally:
            await self._chunks_in.aclose()
            self._received.set()

    def discard(self) -> None:
        """Stop buffering. Unread and later chunks are dropped as they arrive."""
        self._discarding = True
        self._chunks_out.close()

    async def wait_received(self) -> None:
        await self._received.wait()

    async def close(self) -> None:
        """Mark the stream closed and run the ``on_closed`` callback once."""
        if self._closed:
            return
        self._closed = True
        self._chunks_in.close()
        self._chunks_out.close()
        if self._on_closed is not None:
            await invoke(self._on_closed)


class OutputStream:
    """Response body sink over ASGI ``send()``.

    ``write()`` only buffers. ``flush()`` sends the head (first time) and
    the buffered bytes as a body chunk. ``close()`` sends whatever is left
    as the final chunk; a response closed before any flush gets an exact
    ``content-length``.
    """

    __slots__ = ("_closed", "_closed_event", "_head", "_pending", "_send", "_started", "_status")

    def __init__(self, send: Send, head: HeadFactory) -> None:
        self._send = send
        self._head = head
        self._pending = bytearray()
        self._started = False
        self._closed = False
        self._status = 200
        self._closed_event = anyio.Event()

    @property
    def started(self) -> bool:
        """True once the response head has been sent."""
        return self._started

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, data: bytes | bytearray | memoryview | str) -> None:
        """Buffer *data*. Strings are encoded as UTF-8."""
        if self._closed:
            msg = "Cannot write to a closed output stream."
            raise StreamClosedError(msg)
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._pending.extend(data)

    def _take_pending(self) -> bytes:
        body = bytes(self._pending)
        self._pending.clear()
        if not body_allowed(self._status):
            return b""
        return body

    async def flush(self) -> None:
        """Send buffered bytes now."""
        if self._closed:
            msg = "Cannot flush a closed output stream."
            raise StreamClosedError(msg)
        if not self._started:
            self._status, headers = self._head()
            self._started = True
            await send_head(self._send, self._status, headers)
        body = self._take_pending()
        if body:
            await send_body(self._send, body, more_body=True)

    async def close(self) -> None:
        """Send the final chunk. Closing a closed stream is a no-op."""
        if self._closed:
            return
        self._closed = True
        try:
            if self._started:
                await send_body(self._send, self._take_pending(), more_body=False)
                return
            self._status, headers = self._head()
            self._started = True
            body = self._take_pending()
            length = len(body) if body_allowed(self._status) else None
            await send_head(self._send, self._status, headers, content_length=length)
            await send_body(self._send, body, more_body=False)
        finally:
            self._closed_event.set()

    async def wait_closed(self) -> None:
        await self._closed_event.wait()
