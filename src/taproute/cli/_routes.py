"""``taproute routes`` — list compiled routes.

Prints one row per registry entry with domain, method, rule and handler,
in registration order.
"""

import argparse

from taproute.cli._resolve import build_router_or_exit


def run_routes(args: argparse.Namespace) -> None:
    """Load ``args.sources`` and print the route table."""
    router = build_router_or_exit(args.sources)

    rows = [
        (domain, method, route.rule or "/", str(route.handler))
        for domain, method, route in router.entries()
    ]
    if not rows:
        print("No routes registered.")
        return

    headers = ("DOMAIN", "METHOD", "RULE", "HANDLER")
    widths = [max(len(headers[i]), *(len(row[i]) for row in rows)) for i in range(3)]
    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"

    print(fmt.format(*headers))
    sep_len = sum(widths) + 6 + max(len(row[3]) for row in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))
