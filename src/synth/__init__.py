"""Synth — middleware chains and path-parameter routing over an ASGI transport.

Basic usage::

    from synth import GET, route, start

    route(GET, "/", lambda req, res: res.write("Hello, synthesizers!"))

    def greet(req, res):
        res.write(f"Hello, {req.path.split('/')[2]}")

    route(GET, "/person/:name", greet)

    start(7000)

Or with an explicit server::

    from synth import Server

    server = Server()
    server.add_middleware_handler(AccessLogMiddleware())
    server.route("GET", "/hey", lambda req, res: res.write("yo"))
    server.listen("127.0.0.1", 7000)
"""

__version__ = "0.1.0"
__all__ = [
    "DELETE",
    "GET",
    "HEAD",
    "OPTIONS",
    "PATCH",
    "POST",
    "PUT",
    "AccessLogMiddleware",
    "ConfigurationError",
    "HTTPError",
    "HttpServer",
    "Request",
    "Response",
    "Route",
    "Router",
    "SecurityHeadersMiddleware",
    "Server",
    "ServerConfig",
    "SynthError",
    "matches",
    "route",
    "start",
    "use",
]

_SHORTCUTS = frozenset(
    ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "route", "use", "start")
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import synth`` fast while providing a clean top-level API.
    """
    if name == "Server":
        from synth.server import Server

        return Server

    if name == "ServerConfig":
        from synth.config import ServerConfig

        return ServerConfig

    if name == "HttpServer":
        from synth.transport.http_server import HttpServer

        return HttpServer

    if name == "Request":
        from synth.http.request import Request

        return Request

    if name == "Response":
        from synth.http.response import Response

        return Response

    if name == "Route":
        from synth.routing.route import Route

        return Route

    if name == "Router":
        from synth.routing.router import Router

        return Router

    if name == "matches":
        from synth.routing.matcher import matches

        return matches

    if name in ("AccessLogMiddleware", "SecurityHeadersMiddleware"):
        import synth.middleware as mw

        return getattr(mw, name)

    if name in ("SynthError", "ConfigurationError", "HTTPError"):
        import synth.errors as errors

        return getattr(errors, name)

    if name in _SHORTCUTS:
        import synth.shortcuts as shortcuts

        return getattr(shortcuts, name)

    msg = f"module 'synth' has no attribute {name!r}"
    raise AttributeError(msg)
