"""Data-driven declaration provider.

Declarations written as plain data, typically loaded from YAML::

    groups:
      shop.Widgets:
        kind: resource
        domains: [shop.example.com]
        cache: 60
        actions:
          index: {}
          show: {cache: 30}
      shop.Pages:
        prefix: pages
        middlewares: [auth, {throttle: [60, 1]}]
        actions:
          about:
            routes:
              - rule: "about/{section?}"
                methods: [GET]
          contact: {}

``kind`` defaults to ``controller``; ``prefix`` is a literal string or a
component count (default: the router's ``default_prefix_level``). Sources
are the group names, which double as handler class names (``shop.Widgets::show``).
"""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from taproute.discovery.types import Components, GroupDescriptor, GroupKind, MapDeclaration
from taproute.errors import ConfigurationError
from taproute.routing.tap import normalize_middlewares


def _require_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        msg = f"{where}: expected a mapping, got {type(value).__name__}"
        raise ConfigurationError(msg)
    return value


def _string_list(value: Any, where: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, Sequence) or not all(isinstance(v, str) for v in value):
        msg = f"{where}: expected a string or a list of strings"
        raise ConfigurationError(msg)
    return tuple(value)


def _middlewares(value: Any, where: str) -> dict[str, tuple[Any, ...]]:
    if value is None:
        return {}
    if isinstance(value, (str, Mapping)):
        return normalize_middlewares(value)
    if not isinstance(value, Sequence):
        msg = f"{where}: middlewares must be a name, a mapping or a list"
        raise ConfigurationError(msg)
    declared: dict[str, tuple[Any, ...]] = {}
    for entry in value:
        if not isinstance(entry, (str, Mapping)):
            msg = f"{where}: unsupported middleware entry {entry!r}"
            raise ConfigurationError(msg)
        for name, args in normalize_middlewares(entry).items():
            declared.setdefault(name, args)
    return declared


def _components(node: Mapping[str, Any], where: str) -> Components:
    constraints = _require_mapping(node.get("where"), f"{where}.where")
    cache_duration = node.get("cache", 0)
    valid = isinstance(cache_duration, int) and not isinstance(cache_duration, bool)
    if not valid or cache_duration < 0:
        msg = f"{where}.cache: expected a non-negative integer, got {cache_duration!r}"
        raise ConfigurationError(msg)
    return Components(
        domains=_string_list(node.get("domains"), f"{where}.domains"),
        middlewares=_middlewares(node.get("middlewares"), f"{where}.middlewares"),
        constraints={str(k): str(v) for k, v in constraints.items()},
        cache_duration=cache_duration,
    )


class MappingProvider:
    """Supplies declarations from a ``{"groups": {...}}`` document."""

    def __init__(self, document: Mapping[str, Any]) -> None:
        document = _require_mapping(document, "document")
        if "groups" not in document:
            msg = "document: missing top-level 'groups' mapping"
            raise ConfigurationError(msg)
        self._groups = _require_mapping(document["groups"], "groups")

    @classmethod
    def from_yaml(cls, path: str | Path) -> "MappingProvider":
        """Load declarations from a YAML file."""
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as f:
                document = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            msg = f"{path}: invalid YAML: {exc}"
            raise ConfigurationError(msg) from exc
        return cls(document or {})

    def sources(self) -> list[str]:
        """Group names in document order."""
        return list(self._groups)

    def _group_node(self, source: str) -> Mapping[str, Any]:
        if source not in self._groups:
            msg = f"Unknown route group {source!r}"
            raise ConfigurationError(msg)
        return _require_mapping(self._groups[source], source)

    def _action_node(self, source: str, action: str) -> Mapping[str, Any]:
        actions = _require_mapping(self._group_node(source).get("actions"), f"{source}.actions")
        if action not in actions:
            msg = f"{source}: unknown action {action!r}"
            raise ConfigurationError(msg)
        return _require_mapping(actions[action], f"{source}.{action}")

    def identify(self, source: str) -> str:
        return str(source)

    def group(self, source: str) -> GroupDescriptor:
        node = self._group_node(source)
        kind = node.get("kind", GroupKind.CONTROLLER.value)
        try:
            group_kind = GroupKind(kind)
        except ValueError:
            msg = f"{source}.kind: expected 'controller' or 'resource', got {kind!r}"
            raise ConfigurationError(msg) from None
        prefix = node.get("prefix")
        if prefix is not None and (not isinstance(prefix, (str, int)) or isinstance(prefix, bool)):
            msg = f"{source}.prefix: expected a string or an integer, got {prefix!r}"
            raise ConfigurationError(msg)
        return GroupDescriptor(group_kind, prefix)

    def actions(self, source: str) -> list[str]:
        return list(_require_mapping(self._group_node(source).get("actions"), f"{source}.actions"))

    def maps(self, source: str, action: str) -> tuple[MapDeclaration, ...]:
        where = f"{source}.{action}.routes"
        entries = self._action_node(source, action).get("routes") or []
        if not isinstance(entries, Sequence) or isinstance(entries, str):
            msg = f"{where}: expected a list"
            raise ConfigurationError(msg)
        declarations: list[MapDeclaration] = []
        for entry in entries:
            entry = _require_mapping(entry, where)
            rule = entry.get("rule")
            if rule is not None and not isinstance(rule, str):
                msg = f"{where}.rule: expected a string, got {type(rule).__name__}"
                raise ConfigurationError(msg)
            methods = _string_list(entry.get("methods"), f"{where}.methods") or ("GET", "POST")
            declarations.append(MapDeclaration(rule, tuple(m.upper() for m in methods)))
        return tuple(declarations)

    def components(self, source: str, action: str | None = None) -> Components:
        if action is None:
            return _components(self._group_node(source), source)
        return _components(self._action_node(source, action), f"{source}.{action}")
