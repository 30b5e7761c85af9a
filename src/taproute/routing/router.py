"""Route registry with domain/method fallback search.

Routes are stored as domain -> method -> rule -> Route. A lookup tries the
requested domain before the ``*`` wildcard domain and, within each domain,
the requested method before the ``*`` wildcard method. Inside a bucket the
first route, in registration order, whose pattern matches wins.

The registry is filled during a single-threaded load phase and only read
afterwards. It does no locking; callers must finish loading before serving
concurrent lookups.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from taproute.config import RouterConfig
from taproute.discovery.protocol import DeclarationProvider
from taproute.discovery.types import Components, GroupKind, MapDeclaration
from taproute.errors import ConfigurationError, NotFound
from taproute.routing.group import Controller, Resource
from taproute.routing.route import Route, RouteMatch

logger = logging.getLogger("taproute.routing")

WILDCARD = "*"


def _candidates(value: str) -> tuple[str, ...]:
    return (WILDCARD,) if value == WILDCARD else (value, WILDCARD)


class Router:
    """Registry of compiled routes.

    Usage::

        router = Router()
        router.load(Users)
        get("health", health_check).install(router)

        match = router.search("/users/42", "GET", "api.example.com")
        if match is not None:
            match.route.handler, match.arguments
    """

    __slots__ = (
        "_action_components",
        "_group_components",
        "_routes",
        "_sources",
        "config",
        "provider",
    )

    def __init__(
        self,
        provider: DeclarationProvider | None = None,
        config: RouterConfig | None = None,
    ) -> None:
        if provider is None:
            from taproute.discovery.annotations import AnnotationProvider

            provider = AnnotationProvider()
        self.provider = provider
        self.config = config or RouterConfig()
        self._routes: dict[str, dict[str, dict[str, Route]]] = {}
        self._sources: set[str] = set()
        self._group_components: dict[str, Components] = {}
        self._action_components: dict[str, dict[str, Components]] = {}

    def __len__(self) -> int:
        return sum(len(bucket) for methods in self._routes.values() for bucket in methods.values())

    def __repr__(self) -> str:
        return f"Router(routes={len(self)}, sources={len(self._sources)})"

    # -- Registration --

    def set(
        self,
        route: Route,
        methods: Iterable[str] | None = None,
        domains: Iterable[str] | None = None,
    ) -> None:
        """Register *route* under every domain × method pair.

        ``None`` means the ``*`` wildcard. A route with the same rule already
        in a bucket is replaced.
        """
        methods = tuple(methods) if methods is not None else (WILDCARD,)
        domains = tuple(domains) if domains is not None else (WILDCARD,)
        for domain in domains:
            by_method = self._routes.setdefault(domain, {})
            for method in methods:
                bucket = by_method.setdefault(method, {})
                if route.rule in bucket:
                    logger.debug("Replacing %s %s %r", domain, method, route.rule)
                bucket[route.rule] = route

    def load(self, source: Any) -> list[Route]:
        """Load the route declarations of *source* through the provider.

        Loading a source a second time is a no-op. Configuration errors are
        re-raised with the source identifier in the message. A failed load
        registers nothing and may be retried.
        """
        source_id = self.provider.identify(source)
        if source_id in self._sources:
            logger.debug("%s already loaded, skipped", source_id)
            return []
        self._sources.add(source_id)

        try:
            group = self.provider.group(source)
            if group is None:
                logger.debug("%s declares no route group", source_id)
                return []
            defaults = self._components(source, source_id)
            prefix_or_level = group.prefix_or_level
            if prefix_or_level is None:
                prefix_or_level = self.config.default_prefix_level
            if group.kind is GroupKind.RESOURCE:
                resource = Resource(
                    source_id,
                    prefix_or_level,
                    defaults,
                    id_pattern=self.config.resource_id_pattern,
                )
                for action in self.provider.actions(source):
                    resource.register(action, self._components(source, source_id, action))
                routes = resource.loading(self)
            else:
                controller = Controller(source_id, prefix_or_level, defaults)
                for action in self.provider.actions(source):
                    components = self._components(source, source_id, action)
                    declarations = self.provider.maps(source, action) or (
                        MapDeclaration(None, self.config.default_methods),
                    )
                    for declaration in declarations:
                        controller.action(action, declaration, components)
                routes = controller.loading(self)
        except ConfigurationError as exc:
            self._sources.discard(source_id)
            msg = f"Failed to load routes from {source_id}: {exc}"
            raise ConfigurationError(msg) from exc
        except Exception:
            self._sources.discard(source_id)
            raise
        finally:
            self._group_components.pop(source_id, None)
            self._action_components.pop(source_id, None)

        logger.debug("Loaded %d route(s) from %s", len(routes), source_id)
        return routes

    def load_all(self, sources: Iterable[Any]) -> list[Route]:
        """Load several sources in order."""
        routes: list[Route] = []
        for source in sources:
            routes.extend(self.load(source))
        return routes

    def _components(self, source: Any, source_id: str, action: str | None = None) -> Components:
        """Memoized component lookup, scoped to the current load."""
        if action is None:
            if source_id not in self._group_components:
                self._group_components[source_id] = self.provider.components(source)
            return self._group_components[source_id]
        by_action = self._action_components.setdefault(source_id, {})
        if action not in by_action:
            by_action[action] = self.provider.components(source, action)
        return by_action[action]

    def clear(self) -> None:
        """Drop every route, loaded-source record and memoized component."""
        self._routes.clear()
        self._sources.clear()
        self._group_components.clear()
        self._action_components.clear()

    # -- Lookup --

    def search(
        self, path: str, method: str = WILDCARD, domain: str = WILDCARD
    ) -> RouteMatch | None:
        """Find the first route matching *path*; ``None`` when nothing matches."""
        path = path.lstrip("/")
        for candidate_domain in _candidates(domain):
            by_method = self._routes.get(candidate_domain)
            if by_method is None:
                continue
            for candidate_method in _candidates(method):
                bucket = by_method.get(candidate_method)
                if bucket is None:
                    continue
                for route in bucket.values():
                    arguments = route.match(path)
                    if arguments is not None:
                        return RouteMatch(route=route, arguments=arguments)
        return None

    def resolve(self, path: str, method: str = WILDCARD, domain: str = WILDCARD) -> RouteMatch:
        """Like :meth:`search`, but raises ``NotFound`` instead of returning ``None``."""
        match = self.search(path, method, domain)
        if match is None:
            raise NotFound(f"No route matches {method} {path!r} on {domain}")
        return match

    # -- Introspection --

    @property
    def routes(self) -> dict[str, dict[str, dict[str, Route]]]:
        """A copy of the domain -> method -> rule -> Route table."""
        return {
            domain: {method: dict(bucket) for method, bucket in by_method.items()}
            for domain, by_method in self._routes.items()
        }

    @property
    def loaded(self) -> frozenset[str]:
        """Identifiers of every source loaded since the last clear."""
        return frozenset(self._sources)

    def entries(self) -> Iterator[tuple[str, str, Route]]:
        """Yield ``(domain, method, route)`` in registration order."""
        for domain, by_method in self._routes.items():
            for method, bucket in by_method.items():
                for route in bucket.values():
                    yield domain, method, route
