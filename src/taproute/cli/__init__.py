"""taproute CLI — inspect and exercise route declarations.

Entry point registered as ``taproute`` in ``pyproject.toml``::

    [project.scripts]
    taproute = "taproute.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``taproute`` command."""
    parser = argparse.ArgumentParser(
        prog="taproute",
        description="taproute — declarative HTTP route compilation and dispatch.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log route installation to stderr",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- taproute routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List compiled routes")
    routes_parser.add_argument(
        "sources",
        nargs="+",
        help="YAML files or import strings (e.g. myapp.views:Users)",
    )

    # -- taproute match ----------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Resolve a request path")
    match_parser.add_argument("path", help="Request path (e.g. /users/42)")
    match_parser.add_argument(
        "sources",
        nargs="+",
        help="YAML files or import strings (e.g. myapp.views:Users)",
    )
    match_parser.add_argument("--method", default="*", help="HTTP method (default: any)")
    match_parser.add_argument("--domain", default="*", help="Host name (default: any)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command == "routes":
        from taproute.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from taproute.cli._match import run_match

        run_match(args)
