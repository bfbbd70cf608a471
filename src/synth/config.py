"""Server configuration.

ServerConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServerConfig(port=8080, log_level="debug")

    Arguments passed to ``Server.listen()`` take precedence over these
    values.
    """

    # Binding
    host: str = "127.0.0.1"
    port: int = 7000
    backlog: int = 2048

    # Logging (forwarded to uvicorn)
    log_level: str = "info"
    access_log: bool = False
