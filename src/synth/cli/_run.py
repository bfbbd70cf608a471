"""``synth run`` — serve a server until interrupted."""

import argparse
import sys

from synth.cli._resolve import resolve_server


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.server`` and listen on it.

    CLI flags override the server's config.
    """
    try:
        server = resolve_server(args.server)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    server.listen(args.host, args.port, args.backlog)
