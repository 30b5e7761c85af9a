"""``taproute match`` — resolve one request against loaded routes."""

import argparse
import sys

from taproute.cli._resolve import build_router_or_exit


def run_match(args: argparse.Namespace) -> None:
    """Print the matched rule, handler and arguments; exit 1 when nothing matches."""
    router = build_router_or_exit(args.sources)

    match = router.search(args.path, args.method, args.domain)
    if match is None:
        print(f"No route matches {args.method} {args.path!r} on {args.domain}", file=sys.stderr)
        raise SystemExit(1)

    route = match.route
    print(f"rule:     {route.rule or '/'}")
    print(f"handler:  {route.handler}")
    for name, value in match.arguments.items():
        print(f"  {name} = {value!r}")
    if route.middlewares:
        listed = ", ".join(
            f"{name}({', '.join(map(str, params))})" if params else name
            for name, params in route.middlewares.items()
        )
        print(f"middleware: {listed}")
    if route.cached:
        print(f"cache:    {route.cache_duration}s")
