"""ASGI callable types.

The transport is the only module that reads scopes or sends messages;
everything above it works with ``HttpRequest`` / ``HttpResponse``.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

Scope: TypeAlias = MutableMapping[str, Any]
Message: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[Message]]
Send: TypeAlias = Callable[[Message], Awaitable[None]]


def address(value: Any) -> tuple[str | None, int | None]:
    """``(host, port)`` from a scope's ``client``/``server`` entry, which may be absent."""
    if not value:
        return None, None
    host, port = value[0], value[1]
    return host, port
