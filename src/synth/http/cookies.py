"""Request cookies in, ``Set-Cookie`` directives out.

``parse_cookies`` reads the ``Cookie`` request header into a dict.
Handlers append ``Cookie`` values to ``response.cookies``; the transport
turns each into one ``set-cookie`` header when the head is sent.
"""

from dataclasses import dataclass


def parse_cookies(header: str) -> dict[str, str]:
    """``"a=1; b=2"`` -> ``{"a": "1", "b": "2"}``. Pairs without ``=`` are skipped."""
    cookies: dict[str, str] = {}
    for name, sep, value in (part.partition("=") for part in header.split(";")):
        if sep:
            cookies[name.strip()] = value.strip()
    return cookies


@dataclass(frozen=True, slots=True)
class Cookie:
    """One cookie to set on the client.

    Usage::

        res.cookies.append(Cookie("session", token, max_age=3600, secure=True))
    """

    name: str
    value: str
    max_age: int | None = None
    path: str | None = "/"
    domain: str | None = None
    secure: bool = False
    http_only: bool = True
    same_site: str | None = "Lax"

    def to_header_value(self) -> str:
        attributes: list[str] = [f"{self.name}={self.value}"]
        optional = (
            ("Max-Age", self.max_age),
            ("Path", self.path),
            ("Domain", self.domain),
            ("SameSite", self.same_site),
        )
        attributes.extend(f"{key}={value}" for key, value in optional if value is not None)
        if self.secure:
            attributes.append("Secure")
        if self.http_only:
            attributes.append("HttpOnly")
        return "; ".join(attributes)
