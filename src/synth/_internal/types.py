"""Shared type aliases used across synth modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: (Request, Response), sync or async
Handler: TypeAlias = Callable[..., Any]

# Transport-level handler: (HttpRequest, HttpResponse), sync or async
RawHandler: TypeAlias = Callable[..., Any]

# Transport predicate: decides whether a handler serves an HttpRequest
Predicate: TypeAlias = Callable[[Any], bool]

# Transport error callback: receives the exception
ErrorCallback: TypeAlias = Callable[[BaseException], Any]
