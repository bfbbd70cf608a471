"""Transport — the ASGI server layer that routes requests by predicate.

Synth's dispatch layer sits on top of this: it registers predicates and
handlers here and never touches ASGI messages itself.
"""

from synth.transport.exchange import ConnectionInfo, HttpRequest, HttpResponse
from synth.transport.http_server import HttpServer
from synth.transport.streams import InputStream, OutputStream

__all__ = [
    "ConnectionInfo",
    "HttpRequest",
    "HttpResponse",
    "HttpServer",
    "InputStream",
    "OutputStream",
]
