"""Synth exception hierarchy.

Shared across the matcher, router, transport, server and middleware so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class SynthError(Exception):
    """Base for all synth-specific errors."""


class ConfigurationError(SynthError):
    """Raised when the server is modified after it started serving.

    Middleware and routes are setup-time configuration. Once the server
    freezes (on ``listen()`` or the first request) they are read-only.
    """


class TransportError(SynthError):
    """Raised when the transport is used in a state it does not support.

    For example, reading ``port`` before the server is listening.
    """


class StreamClosedError(SynthError):
    """Raised when writing to an output stream that is already closed."""


class HeadersSentError(SynthError):
    """Raised when status or headers change after the response started."""


@dataclass(frozen=True, slots=True)
class HTTPError(SynthError):
    """An error that maps directly to an HTTP status code.

    Raised by middleware or route handlers to end the request with the
    given status. The server catches it and writes a plain-text response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)
