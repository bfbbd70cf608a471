"""Route frozen dataclass."""

from dataclasses import dataclass

from synth._internal.types import Handler


@dataclass(frozen=True, slots=True)
class Route:
    """A declared (method, path template, handler) binding.

    Path templates are ``/``-delimited; segments starting with ``:`` are
    named parameters matching exactly one non-empty path segment::

        Route("GET", "/person/:name", greet)
    """

    method: str
    path: str
    handler: Handler
