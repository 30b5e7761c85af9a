"""Tap — the mutable builder for one route in progress.

A Tap collects prefix segments, constraints, domains, middleware and a
cache duration, then compiles everything into a :class:`Route` and
registers it on a router::

    get("users/{id}", show_user).add_constraints({"id": r"\\d+"}).install(router)
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypeAlias

from taproute.errors import ConfigurationError
from taproute.routing.route import Handler, Route, as_handler

if TYPE_CHECKING:
    from taproute.routing.router import Router

logger = logging.getLogger("taproute.routing")

MiddlewareSpec: TypeAlias = Mapping[int | str, Any] | Iterable[str]


def _arguments(value: Any) -> tuple[Any, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def normalize_middlewares(middlewares: MiddlewareSpec) -> dict[str, tuple[Any, ...]]:
    """Turn a middleware declaration into an ordered ``name -> args`` dict.

    Positional entries (integer keys, or plain names in a sequence) become
    identifiers with no arguments; named entries keep their value as the
    argument list. The first occurrence of an identifier wins.
    """
    if isinstance(middlewares, str):
        middlewares = [middlewares]
    if isinstance(middlewares, Mapping):
        items: Iterable[tuple[int | str, Any]] = middlewares.items()
    else:
        items = enumerate(middlewares)

    result: dict[str, tuple[Any, ...]] = {}
    for key, value in items:
        if isinstance(key, int):
            name, args = str(value), ()
        else:
            name, args = key, _arguments(value)
        result.setdefault(name, args)
    return result


class Tap:
    """Accumulates one route's configuration before it is installed."""

    __slots__ = (
        "_cache_duration",
        "_constraints",
        "_domains",
        "_installed",
        "_middlewares",
        "_prefixes",
        "handler",
        "methods",
        "rule",
    )

    def __init__(
        self,
        methods: Iterable[str],
        rule: str,
        handler: Handler | Callable[..., Any] | str,
    ) -> None:
        self.methods: tuple[str, ...] = tuple(m.upper() for m in methods)
        self.rule = rule
        self.handler = as_handler(handler)
        self._prefixes: list[str] = []
        self._constraints: dict[str, str] = {}
        self._domains: list[str] = []
        self._middlewares: dict[str, tuple[Any, ...]] = {}
        self._cache_duration = 0
        self._installed = False

    def __repr__(self) -> str:
        return f"Tap(methods={self.methods!r}, rule={self.rule!r}, handler={self.handler!s})"

    @property
    def prefixes(self) -> tuple[str, ...]:
        return tuple(self._prefixes)

    @property
    def constraints(self) -> dict[str, str]:
        return dict(self._constraints)

    @property
    def domains(self) -> tuple[str, ...]:
        return tuple(self._domains)

    @property
    def middlewares(self) -> dict[str, tuple[Any, ...]]:
        return dict(self._middlewares)

    @property
    def cache_duration(self) -> int:
        return self._cache_duration

    def add_prefix(self, prefix: str) -> "Tap":
        """Append a prefix segment. Absolute rules (leading ``/``) are never prefixed."""
        prefix = prefix.strip("/")
        if not self.rule.startswith("/") and prefix:
            self._prefixes.append(prefix)
        return self

    def add_constraints(self, constraints: Mapping[str, str]) -> "Tap":
        for name, fragment in constraints.items():
            self._constraints.setdefault(name, fragment)
        return self

    def add_domains(self, *domains: str) -> "Tap":
        self._domains.extend(domains)
        return self

    def add_middlewares(self, middlewares: MiddlewareSpec) -> "Tap":
        for name, args in normalize_middlewares(middlewares).items():
            self._middlewares.setdefault(name, args)
        return self

    def set_cache_duration(self, seconds: int) -> "Tap":
        self._cache_duration = seconds
        return self

    def complete_rule(self) -> str:
        """Join the prefix segments and the rule into the final rule string."""
        rule = self.rule.lstrip("/")
        if not self._prefixes:
            return rule
        if not rule:
            return "/".join(self._prefixes)
        return "/".join([*self._prefixes, rule])

    def build(self) -> Route:
        """Compile the accumulated configuration into a Route."""
        return Route.build(
            rule=self.complete_rule(),
            handler=self.handler,
            constraints=self._constraints,
            middlewares=self._middlewares,
            cache_duration=self._cache_duration,
        )

    def install(self, router: "Router", route: Route | None = None) -> Route:
        """Register the route under every domain × method pair.

        *route* is compiled from the tap when not given. Empty method or
        domain lists register under the ``*`` wildcard. A Tap can be
        installed only once.
        """
        if self._installed:
            msg = f"Route {self.rule!r} for {self.handler} has already been installed."
            raise ConfigurationError(msg)
        if route is None:
            route = self.build()
        router.set(route, self.methods or None, tuple(self._domains) or None)
        self._installed = True
        logger.debug(
            "Installed %s %s -> %s (domains: %s)",
            ",".join(self.methods) or "*",
            route.rule,
            route.handler,
            ",".join(self._domains) or "*",
        )
        return route


def many(methods: Iterable[str], rule: str, handler: Handler | Callable[..., Any] | str) -> Tap:
    """Start a route answering to each of *methods*."""
    return Tap(methods, rule, handler)


def get(rule: str, handler: Handler | Callable[..., Any] | str) -> Tap:
    return Tap(["GET"], rule, handler)


def post(rule: str, handler: Handler | Callable[..., Any] | str) -> Tap:
    return Tap(["POST"], rule, handler)


def put(rule: str, handler: Handler | Callable[..., Any] | str) -> Tap:
    return Tap(["PUT"], rule, handler)


def patch(rule: str, handler: Handler | Callable[..., Any] | str) -> Tap:
    return Tap(["PATCH"], rule, handler)


def delete(rule: str, handler: Handler | Callable[..., Any] | str) -> Tap:
    return Tap(["DELETE"], rule, handler)


def any_method(rule: str, handler: Handler | Callable[..., Any] | str) -> Tap:
    """Start a route that answers to every method."""
    return Tap(["*"], rule, handler)
