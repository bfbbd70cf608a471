"""ASGI response sending — translates output stream activity to ASGI messages.

The output stream buffers writes until it is flushed or closed. The
first flush or close sends the response head; every later flush sends a
body chunk with ``more_body=True``; close sends the final chunk.
"""

import logging

from synth._internal.asgi import Send

logger = logging.getLogger("synth.transport")


def body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_head(
    send: Send,
    status: int,
    headers: list[tuple[bytes, bytes]],
    *,
    content_length: int | None = None,
) -> None:
    """Send ``http.response.start``.

    When *content_length* is given and the headers carry none, a
    ``content-length`` header is appended. Without it the server falls
    back to chunked transfer encoding.
    """
    raw_headers = list(headers)
    if content_length is not None and not any(name == b"content-length" for name, _ in raw_headers):
        raw_headers.append((b"content-length", str(content_length).encode("latin-1")))
    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": raw_headers,
        }
    )


async def send_body(send: Send, body: bytes, *, more_body: bool) -> None:
    """Send one ``http.response.body`` message."""
    await send(
        {
            "type": "http.response.body",
            "body": body,
            "more_body": more_body,
        }
    )
