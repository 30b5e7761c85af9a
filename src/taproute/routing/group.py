"""Group controllers — shared defaults for a set of routes.

A :class:`Controller` owns the prefix, domains, middleware, constraints and
cache duration declared on a source, and merges them into a :class:`Tap`
for every action it is asked to build. Action-level values always win;
group defaults only fill what the action leaves unset.

:class:`Resource` adds the seven RESTful actions::

    index    GET        {prefix}
    create   GET        {prefix}/create
    store    POST       {prefix}
    show     GET        {prefix}/{id}
    edit     GET        {prefix}/{id}/edit
    update   PUT,PATCH  {prefix}/{id}
    destroy  DELETE     {prefix}/{id}
"""

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from taproute.discovery.types import Components, MapDeclaration
from taproute.routing.route import NamedHandler, Route
from taproute.routing.tap import Tap, normalize_middlewares

if TYPE_CHECKING:
    from taproute.routing.router import Router

logger = logging.getLogger("taproute.routing")


def derive_prefix(classname: str, prefix_or_level: str | int) -> str:
    """Resolve a group prefix.

    A string is used as-is. An integer takes that many trailing dotted
    components of *classname*, lower-cased and joined by ``/``::

        derive_prefix("shop.admin.Widgets", 2)  # "admin/widgets"
    """
    if isinstance(prefix_or_level, str):
        return prefix_or_level
    if prefix_or_level <= 0:
        return ""
    parts = classname.split(".")[-prefix_or_level:]
    return "/".join(part.lower() for part in parts)


class Controller:
    """Builds taps for the actions of one declaration source."""

    def __init__(
        self,
        classname: str,
        prefix_or_level: str | int = 1,
        defaults: Components | None = None,
    ) -> None:
        defaults = defaults or Components()
        self.classname = classname
        self.prefix = derive_prefix(classname, prefix_or_level)
        self.domains: tuple[str, ...] = tuple(defaults.domains)
        self.middlewares = normalize_middlewares(defaults.middlewares)
        self.constraints: dict[str, str] = dict(defaults.constraints)
        self.cache_duration = defaults.cache_duration
        self._taps: defaultdict[str, list[Tap]] = defaultdict(list)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.classname!r}, prefix={self.prefix!r})"

    @property
    def pending(self) -> list[Tap]:
        """Taps built but not yet installed, in installation order."""
        return [tap for taps in self._taps.values() for tap in taps]

    def action(
        self,
        name: str,
        declaration: MapDeclaration,
        components: Components | None = None,
    ) -> Tap:
        """Build the tap for one ``(rule, methods)`` declaration of action *name*."""
        components = components or Components()

        domains = components.domains or self.domains

        middlewares = normalize_middlewares(components.middlewares)
        for identifier, args in self.middlewares.items():
            middlewares.setdefault(identifier, args)

        constraints = dict(components.constraints)
        for param, fragment in self.constraints.items():
            constraints.setdefault(param, fragment)

        cache_duration = components.cache_duration or self.cache_duration

        rule = declaration.rule if declaration.rule is not None else name
        tap = Tap(declaration.methods, rule, NamedHandler(f"{self.classname}::{name}"))
        if domains:
            tap.add_domains(*domains)
        if middlewares:
            tap.add_middlewares(middlewares)
        if constraints:
            tap.add_constraints(constraints)
        if cache_duration > 0:
            tap.set_cache_duration(cache_duration)
        tap.add_prefix(self.prefix)

        self._taps[name].append(tap)
        return tap

    def loading(self, router: "Router") -> list[Route]:
        """Install every pending tap on *router* and forget them.

        All routes are compiled before the first one is registered, so a
        bad rule leaves *router* untouched.
        """
        taps = self.pending
        built = [tap.build() for tap in taps]
        routes = [tap.install(router, route) for tap, route in zip(taps, built, strict=True)]
        self._taps.clear()
        return routes


class Resource(Controller):
    """A controller whose actions follow the RESTful resource table."""

    RESTFUL: dict[str, tuple[str, tuple[str, ...]]] = {
        "index": ("", ("GET",)),
        "create": ("create", ("GET",)),
        "store": ("", ("POST",)),
        "show": ("{id}", ("GET",)),
        "edit": ("{id}/edit", ("GET",)),
        "update": ("{id}", ("PUT", "PATCH")),
        "destroy": ("{id}", ("DELETE",)),
    }

    IDENTIFIED: frozenset[str] = frozenset({"show", "edit", "update", "destroy"})

    def __init__(
        self,
        classname: str,
        prefix_or_level: str | int = 1,
        defaults: Components | None = None,
        id_pattern: str = r"[1-9]\d*",
    ) -> None:
        super().__init__(classname, prefix_or_level, defaults)
        self.id_pattern = id_pattern

    def register(self, name: str, components: Components | None = None) -> Tap | None:
        """Build the tap for RESTful action *name*; other names are ignored."""
        if name not in self.RESTFUL:
            logger.debug("%s: %r is not a resource action, skipped", self.classname, name)
            return None
        rule, methods = self.RESTFUL[name]
        tap = self.action(name, MapDeclaration(rule, methods), components)
        if name in self.IDENTIFIED:
            tap.add_constraints({"id": self.id_pattern})
        return tap
