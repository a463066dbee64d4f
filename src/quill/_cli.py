"""Quill CLI — quill dev / quill compile.

Entry point for the ``quill`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the quill CLI."""
    parser = argparse.ArgumentParser(
        prog="quill",
        description="Live-editing server for a single HTML document.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # quill dev
    dev_parser = subparsers.add_parser(
        "dev",
        help="Serve the document for in-browser editing",
    )
    dev_parser.add_argument("root", nargs="?", default=".", help="Project directory")
    dev_parser.add_argument("--host", default=None, help="Bind address (default 127.0.0.1)")
    dev_parser.add_argument("--port", type=int, default=None, help="Bind port (default 8080)")

    # quill compile
    compile_parser = subparsers.add_parser(
        "compile",
        help="Compile the stylesheet once and exit",
    )
    compile_parser.add_argument("root", nargs="?", default=".", help="Project directory")

    return parser


def _get_version() -> str:
    from quill import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from quill.app import compile_style, dev

    if args.command == "dev":
        dev(root=args.root, host=args.host, port=args.port)
    elif args.command == "compile":
        sys.exit(0 if compile_style(root=args.root) else 1)


if __name__ == "__main__":
    main()
