"""Native request/response objects of the transport.

``HttpRequest`` is frozen metadata plus the body ``InputStream``.
``HttpResponse`` carries status, headers and cookies that stay editable
until the first flush or close of its ``OutputStream``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from synth._internal.asgi import Scope, Send, address
from synth.errors import HeadersSentError
from synth.http.cookies import Cookie, parse_cookies
from synth.http.headers import Headers, MutableHeaders
from synth.http.query import QueryParams
from synth.transport.streams import InputStream, OutputStream

REASON_PHRASES: dict[int, str] = {
    200: "OK",
    201: "Created",
    204: "No Content",
    301: "Moved Permanently",
    302: "Found",
    304: "Not Modified",
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


@dataclass(frozen=True, slots=True)
class ConnectionInfo:
    """Addresses of the connection a request arrived on."""

    remote_host: str | None
    remote_port: int | None
    local_port: int | None


def _persistent(http_version: str, headers: Headers) -> bool:
    connection = (headers.get("connection") or "").lower()
    if http_version == "1.0":
        return connection == "keep-alive"
    return connection != "close"


@dataclass(frozen=True, slots=True)
class HttpRequest:
    """An incoming request as the transport sees it.

    Metadata is frozen at creation; the body arrives through
    ``input_stream``.
    """

    method: str
    path: str
    query: QueryParams
    headers: Headers
    cookies: Mapping[str, str]
    protocol_version: str
    connection_info: ConnectionInfo
    input_stream: InputStream

    @classmethod
    def from_asgi(cls, scope: Scope) -> HttpRequest:
        """Build from an ASGI HTTP scope. The input stream starts empty."""
        headers = Headers(tuple(scope.get("headers", ())))
        remote_host, remote_port = address(scope.get("client"))
        _, local_port = address(scope.get("server"))
        return cls(
            method=scope["method"],
            path=scope["path"],
            query=QueryParams(scope.get("query_string", b"")),
            headers=headers,
            cookies=parse_cookies(headers.get("cookie", "") or ""),
            protocol_version=scope.get("http_version", "1.1"),
            connection_info=ConnectionInfo(
                remote_host=remote_host,
                remote_port=remote_port,
                local_port=local_port,
            ),
            input_stream=InputStream(),
        )

    @property
    def query_string(self) -> str:
        return self.query.raw

    @property
    def query_parameters(self) -> QueryParams:
        return self.query

    @property
    def uri(self) -> str:
        """Path plus query string, as requested."""
        qs = self.query.raw
        if qs:
            return f"{self.path}?{qs}"
        return self.path

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int, ``None`` if absent or invalid."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def persistent_connection(self) -> bool:
        return _persistent(self.protocol_version, self.headers)


class HttpResponse:
    """An outgoing response as the transport sees it.

    Status, reason phrase, headers and cookies may change until the head
    is sent by the first ``output_stream.flush()`` or ``close()``.
    """

    __slots__ = (
        "_reason_phrase",
        "_request",
        "_status_code",
        "connection_info",
        "cookies",
        "headers",
        "output_stream",
    )

    def __init__(self, send: Send, request: HttpRequest) -> None:
        self._request = request
        self._status_code = 200
        self._reason_phrase: str | None = None
        self.headers = MutableHeaders()
        self.cookies: list[Cookie] = []
        self.connection_info = request.connection_info
        self.output_stream = OutputStream(send, self._head)

    def _check_not_started(self) -> None:
        if self.output_stream.started:
            msg = "Response head was already sent."
            raise HeadersSentError(msg)

    def _head(self) -> tuple[int, list[tuple[bytes, bytes]]]:
        """Freeze the head and encode it for ASGI."""
        for cookie in self.cookies:
            self.headers.add("set-cookie", cookie.to_header_value())
        self.headers.lock()
        return self._status_code, self.headers.raw()

    @property
    def status_code(self) -> int:
        return self._status_code

    @status_code.setter
    def status_code(self, value: int) -> None:
        self._check_not_started()
        self._status_code = value

    @property
    def reason_phrase(self) -> str:
        """Reason phrase for the status; ASGI servers pick their own on the wire."""
        if self._reason_phrase is not None:
            return self._reason_phrase
        return REASON_PHRASES.get(self._status_code, "")

    @reason_phrase.setter
    def reason_phrase(self, value: str) -> None:
        self._check_not_started()
        self._reason_phrase = value

    @property
    def content_length(self) -> int | None:
        value = self.headers.get("content-length")
        return int(value) if value is not None else None

    @content_length.setter
    def content_length(self, value: int) -> None:
        self.headers.set("content-length", str(value))

    @property
    def persistent_connection(self) -> bool:
        return self._request.persistent_connection
