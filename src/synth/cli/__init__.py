"""Synth CLI — serve a server from an import string.

Entry point registered as ``synth`` in ``pyproject.toml``::

    [project.scripts]
    synth = "synth.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``synth`` command."""
    parser = argparse.ArgumentParser(
        prog="synth",
        description="Synth — middleware chains and path-parameter routing.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- synth run --------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve a synth server")
    run_parser.add_argument(
        "server",
        help="Import string (e.g. myapp:server)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument("--backlog", type=int, default=None, help="Listen backlog")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from synth.cli._run import run_server

        run_server(args)
