"""Query string parameters of a request.

Matching never looks at the query string; handlers and middleware read
it through ``request.query_parameters``.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Read-only view of ``a=1&b=2&a=3``.

    Keeps every pair in request order. Mapping access returns the first
    value for a name; ``get_list`` returns all of them.
    """

    __slots__ = ("_pairs", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        self._raw = query_string.decode("latin-1")
        self._pairs: tuple[tuple[str, str], ...] = tuple(
            parse_qsl(self._raw, keep_blank_values=True)
        )

    def __getitem__(self, name: str) -> str:
        for key, value in self._pairs:
            if key == name:
                return value
        raise KeyError(name)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(key for key, _ in self._pairs))

    def __len__(self) -> int:
        return len({key for key, _ in self._pairs})

    def __repr__(self) -> str:
        return f"QueryParams({self._raw!r})"

    def get_list(self, name: str) -> list[str]:
        return [value for key, value in self._pairs if key == name]

    def pairs(self) -> list[tuple[str, str]]:
        """Every ``(name, value)`` pair, duplicates included, in order."""
        return list(self._pairs)

    @property
    def raw(self) -> str:
        """The undecoded query string, without the leading ``?``."""
        return self._raw
