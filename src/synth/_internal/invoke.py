"""Invoke helpers — call sync or async handlers uniformly.

Route handlers, middleware and stream callbacks can be ``def`` or
``async def``. Any code that calls a user-provided callable must handle
both cases. This module provides a single helper so the sync/async
check lives in exactly one place.

Usage::

    from synth._internal.invoke import invoke

    await invoke(handler, request, response)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it is awaitable.

    Works with both sync and async callables::

        # sync: writes into the buffer, nothing to await
        def hello(req, res):
            res.write("Hello")

        # sync returning an awaitable: awaited automatically
        def echo(req, res):
            return req.input_stream.pipe(res.output_stream)

        # async
        async def slow(req, res):
            await anyio.sleep(1)
            res.write("done")
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
