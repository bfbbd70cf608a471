"""Security headers middleware — X-Frame-Options, X-Content-Type-Options, Referrer-Policy.

Sets common security headers on every response before the rest of the
chain runs, so handlers may still override them. Headers already sent
are left alone.
"""

from dataclasses import dataclass

from synth.http.request import Request
from synth.http.response import Response
from synth.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class SecurityHeadersConfig:
    """Configuration for security headers.

    All values are applied as-is. ``None`` skips the header.
    """

    x_frame_options: str | None = "DENY"
    x_content_type_options: str | None = "nosniff"
    referrer_policy: str | None = "strict-origin-when-cross-origin"
    content_security_policy: str | None = None
    strict_transport_security: str | None = None


class SecurityHeadersMiddleware:
    """Add security headers to every response.

    Usage::

        server.add_middleware_handler(SecurityHeadersMiddleware())

    Or with custom config::

        server.add_middleware_handler(SecurityHeadersMiddleware(SecurityHeadersConfig(
            x_frame_options="SAMEORIGIN",
        )))
    """

    __slots__ = ("_headers",)

    def __init__(self, config: SecurityHeadersConfig | None = None) -> None:
        config = config or SecurityHeadersConfig()
        pairs = (
            ("X-Frame-Options", config.x_frame_options),
            ("X-Content-Type-Options", config.x_content_type_options),
            ("Referrer-Policy", config.referrer_policy),
            ("Content-Security-Policy", config.content_security_policy),
            ("Strict-Transport-Security", config.strict_transport_security),
        )
        self._headers = tuple((name, value) for name, value in pairs if value)

    async def __call__(self, request: Request, response: Response, next: Next) -> None:
        if not response.output_stream.started:
            for name, value in self._headers:
                response.headers.set(name, value)
        await next()
