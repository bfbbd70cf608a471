"""Module-level shortcuts bound to a lazily created default server.

For scripts that need one server and no setup::

    from synth import GET, route, start

    route(GET, "/", lambda req, res: res.write("Hello, synthesizers!"))
    start(7000)
"""

import threading

from synth._internal.types import Handler
from synth.server import Server

GET = "GET"
POST = "POST"
PUT = "PUT"
PATCH = "PATCH"
DELETE = "DELETE"
HEAD = "HEAD"
OPTIONS = "OPTIONS"

_default: Server | None = None
_default_lock = threading.Lock()


def default_server() -> Server:
    """The server the shortcuts register on, created on first use."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = Server()
    return _default


def reset_default_server() -> None:
    """Forget the default server so the next shortcut creates a new one."""
    global _default
    with _default_lock:
        _default = None


def route(method: str, path: str, handler: Handler) -> None:
    """Declare a route on the default server."""
    default_server().route(method, path, handler)


def use(middleware: Handler) -> None:
    """Add a middleware to the default server."""
    default_server().add_middleware_handler(middleware)


def start(port: int | None = None, host: str | None = None) -> None:
    """Serve the default server until it is closed (blocking)."""
    default_server().listen(host, port)
