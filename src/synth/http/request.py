"""Enhanced request — the object route handlers and middleware receive.

Wraps the transport's ``HttpRequest`` by delegation and adds one
request-scoped mutable field, ``data_map``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from synth.http.headers import Headers
    from synth.http.query import QueryParams
    from synth.transport.exchange import ConnectionInfo, HttpRequest
    from synth.transport.streams import InputStream


class Request:
    """Enhanced request.

    Every transport attribute is read through to the wrapped
    ``HttpRequest``; nothing is copied.
    """

    __slots__ = ("_data_map", "_req")

    def __init__(self, req: HttpRequest) -> None:
        self._req = req
        self._data_map: dict[str, str] = {}

    @property
    def data_map(self) -> dict[str, str]:
        """Request-scoped string map for middleware to share decoded data.

        Populated by body-decoding middleware; empty otherwise.
        """
        return self._data_map

    @property
    def native(self) -> HttpRequest:
        """The wrapped transport request."""
        return self._req

    @property
    def method(self) -> str:
        return self._req.method

    @property
    def path(self) -> str:
        return self._req.path

    @property
    def uri(self) -> str:
        return self._req.uri

    @property
    def query_string(self) -> str:
        return self._req.query_string

    @property
    def query_parameters(self) -> QueryParams:
        return self._req.query_parameters

    @property
    def headers(self) -> Headers:
        return self._req.headers

    @property
    def cookies(self) -> Mapping[str, str]:
        return self._req.cookies

    @property
    def input_stream(self) -> InputStream:
        return self._req.input_stream

    @property
    def content_length(self) -> int | None:
        return self._req.content_length

    @property
    def persistent_connection(self) -> bool:
        return self._req.persistent_connection

    @property
    def protocol_version(self) -> str:
        return self._req.protocol_version

    @property
    def connection_info(self) -> ConnectionInfo:
        return self._req.connection_info

    def __repr__(self) -> str:
        return f"Request({self.method} {self.uri})"
