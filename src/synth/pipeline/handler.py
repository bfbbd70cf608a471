"""Route pipeline — runs one matched request through middleware and handler.

Wraps the transport's native objects in ``Request`` / ``Response``,
arms the closure safeguard, runs the middleware chain and maps faults
to error responses.
"""

from collections.abc import Callable, Sequence
from typing import Any

from synth._internal.types import Handler
from synth.errors import HTTPError
from synth.http.request import Request
from synth.http.response import Response
from synth.middleware.chain import run_chain
from synth.pipeline.errors import handle_http_error, handle_internal_error
from synth.transport.exchange import HttpRequest, HttpResponse


def _close_output(response: HttpResponse) -> Callable[[], Any]:
    async def on_closed() -> None:
        if not response.output_stream.closed:
            await response.output_stream.close()

    return on_closed


async def handle_request(
    req: HttpRequest,
    res: HttpResponse,
    *,
    middleware: Sequence[Handler],
    handler: Handler,
    report_error: Callable[[BaseException], None],
) -> None:
    """Process a single matched request through the full pipeline."""
    request = Request(req)
    response = Response(res)

    # Whatever the chain does, the response ends once the request does
    req.input_stream.on_closed = _close_output(res)

    try:
        await run_chain(request, response, middleware, handler)
    except HTTPError as exc:
        await handle_http_error(exc, req, res)
    except Exception as exc:
        await handle_internal_error(exc, req, res)
        report_error(exc)
