"""Route declaration decorators.

Attach routing metadata to classes and their methods; the
:class:`~taproute.discovery.annotations.AnnotationProvider` reads it back
when a router loads the class.

Usage::

    from taproute import cache, controller, domains, route, where

    @controller("api/users")
    @domains("api.example.com")
    class Users:
        @route("{id}", methods=["GET"])
        @where(id=r"\\d+")
        @cache(60)
        def show(self): ...

        def search(self): ...  # GET,POST api/users/search

Component decorators (``domains``, ``middlewares``, ``where``, ``cache``)
work on both classes and methods. Class-level components apply to every
action of that class only; subclasses declare their own.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from taproute.discovery.types import GroupDescriptor, GroupKind, MapDeclaration
from taproute.errors import ConfigurationError
from taproute.routing.tap import normalize_middlewares

ATTRIBUTE = "__taproute__"


def metadata(obj: Any, *, create: bool = False) -> dict[str, Any]:
    """Return the routing metadata stored on *obj*.

    Class metadata is looked up in the class's own namespace so it is
    never inherited.
    """
    if isinstance(obj, type):
        meta = vars(obj).get(ATTRIBUTE)
    else:
        meta = getattr(obj, ATTRIBUTE, None)
    if meta is None:
        meta = {}
        if create:
            setattr(obj, ATTRIBUTE, meta)
    return meta


def _group(kind: GroupKind, prefix_or_level: str | int | None) -> Callable[[type], type]:
    def decorator(cls: type) -> type:
        if not isinstance(cls, type):
            msg = f"@{kind.value} can only decorate classes, got {cls!r}"
            raise ConfigurationError(msg)
        metadata(cls, create=True)["group"] = GroupDescriptor(kind, prefix_or_level)
        return cls

    return decorator


def controller(prefix_or_level: str | int | None = None) -> Callable[[type], type]:
    """Declare a class as a route group with a shared prefix.

    Pass a prefix string, or the number of trailing components of the
    class's dotted path to derive the prefix from (lower-cased). Without
    either, the router's ``default_prefix_level`` applies.
    """
    return _group(GroupKind.CONTROLLER, prefix_or_level)


def resource(prefix_or_level: str | int | None = None) -> Callable[[type], type]:
    """Declare a class as a RESTful resource (index, create, store, show, edit, update, destroy)."""
    return _group(GroupKind.RESOURCE, prefix_or_level)


def route(
    rule: str | None = None,
    methods: str | Iterable[str] = ("GET", "POST"),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Map a method to a rule. Repeatable; ``rule=None`` uses the method name."""
    if isinstance(methods, str):
        methods = [methods]
    declaration = MapDeclaration(rule, tuple(m.upper() for m in methods))

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        maps = metadata(func, create=True).setdefault("maps", [])
        # Decorators apply bottom-up; keep top-to-bottom declaration order.
        maps.insert(0, declaration)
        return func

    return decorator


def _component(key: str, value: Any) -> Callable[[Any], Any]:
    def decorator(obj: Any) -> Any:
        metadata(obj, create=True)[key] = value
        return obj

    return decorator


def domains(*names: str) -> Callable[[Any], Any]:
    """Restrict routes to the given host names."""
    return _component("domains", tuple(names))


def middlewares(*entries: str | Mapping[str, Any], **named: Any) -> Callable[[Any], Any]:
    """Attach middleware identifiers, optionally with arguments.

    ``@middlewares("auth", throttle=[60, 1])`` declares ``auth`` with no
    arguments and ``throttle`` with ``(60, 1)``.
    """
    declared: dict[str, tuple[Any, ...]] = {}
    for entry in entries:
        for name, args in normalize_middlewares(entry).items():
            declared.setdefault(name, args)
    for name, args in normalize_middlewares(named).items():
        declared.setdefault(name, args)
    return _component("middlewares", declared)


def where(constraints: Mapping[str, str] | None = None, **named: str) -> Callable[[Any], Any]:
    """Constrain placeholders with regular-expression fragments."""
    return _component("constraints", {**(constraints or {}), **named})


def cache(duration: int) -> Callable[[Any], Any]:
    """Record a response cache duration in seconds (0 disables)."""
    if duration < 0:
        msg = f"Cache duration must not be negative, got {duration}"
        raise ConfigurationError(msg)
    return _component("cache_duration", duration)
