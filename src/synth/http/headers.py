"""Case-insensitive HTTP headers.

``Headers`` is the read-only request side, decoded once from the ASGI
scope's byte pairs. ``MutableHeaders`` is the response
side: editable until the response starts, then locked.
"""

from collections.abc import Iterator, Mapping

from synth.errors import HeadersSentError


class Headers(Mapping[str, str]):
    """Request headers as read from the ASGI scope.

    Lookups ignore case and return the first value; ``get_list`` returns
    every value sent under a name. ``raw`` keeps the original byte pairs.
    """

    __slots__ = ("_decoded", "_raw")

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        self._raw = tuple((bytes(name), bytes(value)) for name, value in raw)
        self._decoded = [
            (name.decode("latin-1").lower(), value.decode("latin-1"))
            for name, value in self._raw
        ]

    def __getitem__(self, name: str) -> str:
        values = self.get_list(name)
        if not values:
            raise KeyError(name)
        return values[0]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and bool(self.get_list(name))

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._decoded))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._decoded))

    def __repr__(self) -> str:
        return f"Headers({self._decoded!r})"

    def get_list(self, name: str) -> list[str]:
        key = name.lower()
        return [value for k, value in self._decoded if k == key]

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        return self._raw


class MutableHeaders:
    """Response headers, editable until the response head is sent.

    Names are stored lower-cased. ``set`` replaces every value for a name,
    ``add`` appends another value. After ``lock()`` every mutation raises
    ``HeadersSentError``.
    """

    __slots__ = ("_items", "_locked")

    def __init__(self) -> None:
        self._items: list[tuple[str, str]] = []
        self._locked = False

    def _check_unlocked(self) -> None:
        if self._locked:
            msg = "Response headers were already sent."
            raise HeadersSentError(msg)

    def set(self, name: str, value: str) -> None:
        """Replace all values of *name* with *value*."""
        self._check_unlocked()
        key = name.lower()
        self._items = [(k, v) for k, v in self._items if k != key]
        self._items.append((key, value))

    def add(self, name: str, value: str) -> None:
        """Append a value for *name*, keeping existing ones."""
        self._check_unlocked()
        self._items.append((name.lower(), value))

    def remove(self, name: str) -> None:
        """Drop every value of *name*. Missing names are ignored."""
        self._check_unlocked()
        key = name.lower()
        self._items = [(k, v) for k, v in self._items if k != key]

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the first value for *name*, or *default* if missing."""
        key = name.lower()
        for k, v in self._items:
            if k == key:
                return v
        return default

    def get_list(self, name: str) -> list[str]:
        key = name.lower()
        return [v for k, v in self._items if k == key]

    def lock(self) -> None:
        self._locked = True

    @property
    def locked(self) -> bool:
        return self._locked

    def items(self) -> list[tuple[str, str]]:
        return list(self._items)

    def raw(self) -> list[tuple[bytes, bytes]]:
        """Header pairs encoded for an ASGI ``http.response.start`` message."""
        return [(k.encode("latin-1"), v.encode("latin-1")) for k, v in self._items]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = name.lower()
        return any(k == key for k, _ in self._items)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"MutableHeaders({self._items!r})"
