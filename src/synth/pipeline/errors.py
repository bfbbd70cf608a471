"""Error handling pipeline for synth requests.

Maps HTTPError exceptions and unexpected failures to plain-text
responses, and provides the default 404 handler.
"""

import logging

from synth.errors import HTTPError
from synth.transport.exchange import HttpRequest, HttpResponse

logger = logging.getLogger("synth.server")

TEXT_PLAIN = "text/plain; charset=UTF-8"


async def _respond(response: HttpResponse, status: int, body: str) -> None:
    stream = response.output_stream
    if stream.closed:
        return
    if not stream.started:
        response.status_code = status
        response.headers.set("content-type", TEXT_PLAIN)
        stream.write(body)
    await stream.close()


async def not_found_handler(request: HttpRequest, response: HttpResponse) -> None:
    """Default handler for requests no route matched."""
    await _respond(response, 404, "404 Page not found.")


async def handle_http_error(exc: HTTPError, request: HttpRequest, response: HttpResponse) -> None:
    """Write *exc* as a response with its status and extra headers."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
    if not response.output_stream.started:
        for name, value in exc.headers:
            response.headers.set(name, value)
    body = f"{exc.status} {exc.detail}" if exc.detail else str(exc.status)
    await _respond(response, exc.status, body)


async def handle_internal_error(exc: Exception, request: HttpRequest, response: HttpResponse) -> None:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path, exc_info=exc)
    await _respond(response, 500, "500 Internal server error.")
