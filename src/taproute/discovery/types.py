"""Declaration data — plain structured records supplied by providers.

Providers translate whatever the route declarations are written in
(decorators, YAML, ...) into these types. The routing core only ever sees
these records, never the declarations themselves.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class GroupKind(Enum):
    """How a declaration source groups its routes."""

    CONTROLLER = "controller"
    RESOURCE = "resource"


@dataclass(frozen=True, slots=True)
class GroupDescriptor:
    """Group declaration for one source.

    ``prefix_or_level`` is either a literal prefix string or the number of
    trailing class-identifier components to derive the prefix from;
    ``None`` defers to the router configuration.
    """

    kind: GroupKind = GroupKind.CONTROLLER
    prefix_or_level: str | int | None = None


@dataclass(frozen=True, slots=True)
class MapDeclaration:
    """One ``(rule, methods)`` mapping of a member. ``rule=None`` means the member name."""

    rule: str | None = None
    methods: tuple[str, ...] = ("GET", "POST")


@dataclass(frozen=True, slots=True)
class Components:
    """Route components declarable on a group or on a single member.

    Middlewares keep the declared shape: a mapping whose integer keys are
    positional identifiers, or a sequence of identifiers.
    """

    domains: tuple[str, ...] = ()
    middlewares: Mapping[int | str, Any] = field(default_factory=dict)
    constraints: Mapping[str, str] = field(default_factory=dict)
    cache_duration: int = 0
