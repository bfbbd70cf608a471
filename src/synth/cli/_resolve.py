"""Find the ``Server`` named on the command line.

``synth run myapp`` loads ``myapp.server``; ``synth run myapp:build``
loads ``myapp.build`` and calls it when it is a factory. The attribute
part may be dotted (``myapp:services.public``).
"""

import importlib
from functools import reduce

from synth.server import Server

DEFAULT_ATTRIBUTE = "server"


def resolve_server(target: str) -> Server:
    """Import *target* and return the ``Server`` it names.

    Raises ``ModuleNotFoundError`` or ``AttributeError`` when the module
    or attribute is missing, and ``TypeError`` when a factory fails or the
    result is not a ``Server``.
    """
    module_name, _, attribute = target.partition(":")
    module = importlib.import_module(module_name)
    found = reduce(getattr, (attribute or DEFAULT_ATTRIBUTE).split("."), module)

    if not isinstance(found, Server) and callable(found):
        try:
            found = found()
        except Exception as exc:
            raise TypeError(f"Factory function {target!r} raised an error: {exc}") from exc

    if isinstance(found, Server):
        return found
    raise TypeError(f"{target!r} resolved to {type(found).__name__}, not a synth.Server instance")
