"""Enhanced response — the object route handlers and middleware receive.

Wraps the transport's ``HttpResponse`` by delegation and adds
``write()`` for text content.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from synth.http.cookies import Cookie
    from synth.http.headers import MutableHeaders
    from synth.transport.exchange import ConnectionInfo, HttpResponse
    from synth.transport.streams import OutputStream


class Response:
    """Enhanced response.

    Usage::

        def hello(req, res):
            res.write("Hello, World!")
    """

    __slots__ = ("_res",)

    def __init__(self, res: HttpResponse) -> None:
        self._res = res

    def write(self, content: str) -> None:
        """Write *content* as UTF-8 to the output stream."""
        self._res.output_stream.write(content.encode("utf-8"))

    @property
    def native(self) -> HttpResponse:
        """The wrapped transport response."""
        return self._res

    @property
    def status_code(self) -> int:
        return self._res.status_code

    @status_code.setter
    def status_code(self, value: int) -> None:
        self._res.status_code = value

    @property
    def reason_phrase(self) -> str:
        return self._res.reason_phrase

    @reason_phrase.setter
    def reason_phrase(self, value: str) -> None:
        self._res.reason_phrase = value

    @property
    def content_length(self) -> int | None:
        return self._res.content_length

    @content_length.setter
    def content_length(self, value: int) -> None:
        self._res.content_length = value

    @property
    def persistent_connection(self) -> bool:
        return self._res.persistent_connection

    @property
    def headers(self) -> MutableHeaders:
        return self._res.headers

    @property
    def cookies(self) -> list[Cookie]:
        return self._res.cookies

    @property
    def output_stream(self) -> OutputStream:
        return self._res.output_stream

    @property
    def connection_info(self) -> ConnectionInfo:
        return self._res.connection_info

    def __repr__(self) -> str:
        return f"Response({self.status_code})"
