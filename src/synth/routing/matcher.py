"""Route matching — does a concrete method + path satisfy a route?

Matching is segment-wise. Both paths lose exactly one trailing ``/`` and
are split on ``/``. Segment counts must agree; a ``:name`` segment
accepts any non-empty segment, every other segment must be equal
(case-sensitive).

The root path ``/`` normalizes to ``""`` and splits to a single empty
segment, so ``/`` only matches ``/``::

    split_path("/")           -> [""]
    split_path("/hey/")       -> ["", "hey"]
    split_path("/person/bob") -> ["", "person", "bob"]
"""

from functools import lru_cache

from synth.routing.route import Route


def normalize_path(path: str) -> str:
    """Strip exactly one trailing ``/``."""
    if path.endswith("/"):
        return path[:-1]
    return path


def split_path(path: str) -> list[str]:
    """Normalize *path* and split it into segments."""
    return normalize_path(path).split("/")


@lru_cache(maxsize=1024)
def _template_segments(template: str) -> tuple[str, ...]:
    # Split once per template
    return tuple(split_path(template))


def is_param(segment: str) -> bool:
    return segment.startswith(":")


def _segment_matches(path_segment: str, route_segment: str) -> bool:
    if is_param(route_segment):
        return path_segment != ""
    return path_segment == route_segment


def matches(method: str, path: str, route: Route) -> bool:
    """True if *method* and *path* satisfy *route*."""
    if method != route.method:
        return False

    path_segments = split_path(path)
    route_segments = _template_segments(route.path)
    if len(path_segments) != len(route_segments):
        return False

    return all(
        _segment_matches(path_segment, route_segment)
        for path_segment, route_segment in zip(path_segments, route_segments, strict=True)
    )


def path_params(route: Route, path: str) -> dict[str, str]:
    """Extract ``{name: value}`` for the ``:name`` segments of *route*.

    Matching never binds values; handlers that want them call this with
    the request path. The caller must already know the path matches.
    """
    return {
        route_segment[1:]: path_segment
        for path_segment, route_segment in zip(
            split_path(path), _template_segments(route.path), strict=False
        )
        if is_param(route_segment)
    }
