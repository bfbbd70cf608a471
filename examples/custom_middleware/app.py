"""Custom Middleware — function and class middleware examples.

Demonstrates:
- Function middleware (timing — adds X-Response-Time after the handler ran)
- Class middleware (rate limiter — 5 req/min per IP, answers 429 without calling next)
- Sharing decoded data with the handler through ``request.data_map``

Run:
    cd examples/custom_middleware && python app.py
"""

import threading
import time

import anyio

from synth import Request, Response, Server
from synth.middleware import Next

server = Server()


# ---------------------------------------------------------------------------
# Function middleware: timing
# ---------------------------------------------------------------------------


async def timing(request: Request, response: Response, next: Next) -> None:
    """Add X-Response-Time header unless the handler already sent its head."""
    start = time.monotonic()
    await next()
    elapsed = time.monotonic() - start
    if not response.output_stream.started:
        response.headers.set("X-Response-Time", f"{elapsed:.3f}s")


# ---------------------------------------------------------------------------
# Class middleware: rate limiter
# ---------------------------------------------------------------------------


class RateLimiter:
    """Per-IP rate limiter. Answers 429 when the limit is exceeded."""

    def __init__(self, max_requests: int, window: float) -> None:
        self.max_requests = max_requests
        self.window = window
        self._counts: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    async def __call__(self, request: Request, response: Response, next: Next) -> None:
        client_ip = request.headers.get("x-forwarded-for") or request.connection_info.remote_host
        client_ip = (client_ip or "unknown").split(",")[0].strip()

        with self._lock:
            now = time.monotonic()
            self._evict(now)
            hits = self._counts.setdefault(client_ip, [])
            limited = len(hits) >= self.max_requests
            if not limited:
                hits.append(now)

        if limited:
            response.status_code = 429
            response.write("Too Many Requests")
            return
        await next()

    def _evict(self, now: float) -> None:
        """Drop hits older than the window, and IPs left with none."""
        for ip in list(self._counts):
            hits = [t for t in self._counts[ip] if now - t < self.window]
            if hits:
                self._counts[ip] = hits
            else:
                del self._counts[ip]


# ---------------------------------------------------------------------------
# Function middleware: shared data
# ---------------------------------------------------------------------------


def client_name(request: Request, response: Response, next: Next):
    """Put the caller's name (from ?name=) in the data map."""
    request.data_map["name"] = request.query_parameters.get("name", "stranger")
    return next()


# ---------------------------------------------------------------------------
# Middleware stack (runs in registration order)
# ---------------------------------------------------------------------------

server.add_middleware_handler(timing)
server.add_middleware_handler(RateLimiter(max_requests=5, window=60.0))
server.add_middleware_handler(client_name)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@server.route("GET", "/")
def index(req, res):
    res.write("OK")


@server.route("GET", "/slow")
async def slow(req, res):
    await anyio.sleep(0.1)
    res.write("OK")


@server.route("GET", "/whoami")
def whoami(req, res):
    res.write(f"You are {req.data_map['name']}")


if __name__ == "__main__":
    server.listen()
