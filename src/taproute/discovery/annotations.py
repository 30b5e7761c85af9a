"""Decorator-backed declaration provider.

Reads the metadata attached by :mod:`taproute.decorators`. Sources are
classes; actions are their public functions, collected along the MRO in
definition order (a subclass's own methods first).
"""

import inspect
from collections.abc import Callable, Sequence
from typing import Any

from taproute.decorators import metadata
from taproute.discovery.types import Components, GroupDescriptor, MapDeclaration
from taproute.errors import ConfigurationError


def _unwrap(member: Any) -> Callable[..., Any] | None:
    if isinstance(member, (staticmethod, classmethod)):
        member = member.__func__
    return member if inspect.isfunction(member) else None


def _components(meta: dict[str, Any]) -> Components:
    return Components(
        domains=meta.get("domains", ()),
        middlewares=meta.get("middlewares", {}),
        constraints=meta.get("constraints", {}),
        cache_duration=meta.get("cache_duration", 0),
    )


class AnnotationProvider:
    """Supplies declarations attached with ``@controller``, ``@route`` and friends."""

    def _members(self, source: type) -> dict[str, Callable[..., Any]]:
        members: dict[str, Callable[..., Any]] = {}
        for klass in source.__mro__:
            if klass is object:
                continue
            for name, member in vars(klass).items():
                func = _unwrap(member)
                if func is None or name.startswith("_") or name in members:
                    continue
                members[name] = func
        return members

    def _member(self, source: type, action: str) -> Callable[..., Any]:
        try:
            return self._members(source)[action]
        except KeyError:
            msg = f"{self.identify(source)} has no public method {action!r}"
            raise ConfigurationError(msg) from None

    def identify(self, source: Any) -> str:
        if not isinstance(source, type):
            msg = f"Route declarations must be loaded from a class, got {source!r}"
            raise ConfigurationError(msg)
        return f"{source.__module__}.{source.__qualname__}"

    def group(self, source: type) -> GroupDescriptor | None:
        return metadata(source).get("group")

    def actions(self, source: type) -> list[str]:
        return list(self._members(source))

    def maps(self, source: type, action: str) -> Sequence[MapDeclaration]:
        return tuple(metadata(self._member(source, action)).get("maps", ()))

    def components(self, source: type, action: str | None = None) -> Components:
        if action is None:
            return _components(metadata(source))
        return _components(metadata(self._member(source, action)))
