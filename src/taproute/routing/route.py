"""Route, RouteMatch and handler reference frozen dataclasses."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeAlias

from taproute.errors import ConfigurationError
from taproute.routing.pattern import CompiledPattern, compile_rule


@dataclass(frozen=True, slots=True)
class CallableHandler:
    """A free-standing callable registered as a route target."""

    func: Callable[..., Any]

    def __str__(self) -> str:
        return getattr(self.func, "__qualname__", repr(self.func))


@dataclass(frozen=True, slots=True)
class NamedHandler:
    """A ``"ClassName::method"`` style reference, resolved by the caller."""

    target: str

    @property
    def class_name(self) -> str:
        return self.target.partition("::")[0]

    @property
    def method_name(self) -> str:
        return self.target.partition("::")[2]

    def __str__(self) -> str:
        return self.target


Handler: TypeAlias = CallableHandler | NamedHandler


def as_handler(obj: Handler | Callable[..., Any] | str) -> Handler:
    """Wrap a bare callable or string into its handler variant."""
    if isinstance(obj, (CallableHandler, NamedHandler)):
        return obj
    if isinstance(obj, str):
        return NamedHandler(obj)
    if callable(obj):
        return CallableHandler(obj)
    msg = f"Route handler must be a callable or a string, got {type(obj).__name__}"
    raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class Route:
    """A compiled route definition.

    Created once at install time and never mutated. Use :meth:`build` to
    compile the rule and validate the record in one step::

        route = Route.build("users/{id}", "Users::show", {"id": r"\\d+"})
        route.match("users/42")  # {"id": "42"}
    """

    rule: str
    handler: Handler
    pattern: CompiledPattern
    constraints: Mapping[str, str] = field(default_factory=dict)
    middlewares: Mapping[str, tuple[Any, ...]] = field(default_factory=dict)
    cache_duration: int = 0

    @classmethod
    def build(
        cls,
        rule: str,
        handler: Handler | Callable[..., Any] | str,
        constraints: Mapping[str, str] | None = None,
        middlewares: Mapping[str, tuple[Any, ...]] | None = None,
        cache_duration: int = 0,
    ) -> "Route":
        if cache_duration < 0:
            msg = f"Cache duration for rule {rule!r} must not be negative, got {cache_duration}"
            raise ConfigurationError(msg)
        constraints = MappingProxyType(dict(constraints or {}))
        return cls(
            rule=rule,
            handler=as_handler(handler),
            pattern=compile_rule(rule, constraints),
            constraints=constraints,
            middlewares=MappingProxyType(dict(middlewares or {})),
            cache_duration=cache_duration,
        )

    @property
    def cached(self) -> bool:
        return self.cache_duration > 0

    def match(self, path: str) -> dict[str, str] | None:
        """Return extracted arguments when *path* matches, else ``None``."""
        return self.pattern.match(path)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful lookup."""

    route: Route
    arguments: dict[str, str]
