"""Declaration provider protocol.

A provider is any object with these five methods. The router asks it for
plain declaration records and never inspects sources itself::

    class MyProvider:
        def identify(self, source): ...
        def group(self, source): ...
        def actions(self, source): ...
        def maps(self, source, action): ...
        def components(self, source, action=None): ...

No base class required. The router checks the shape, not the lineage.
"""

from collections.abc import Iterable, Sequence
from typing import Any, Protocol, runtime_checkable

from taproute.discovery.types import Components, GroupDescriptor, MapDeclaration


@runtime_checkable
class DeclarationProvider(Protocol):
    """Supplies route declarations for opaque sources."""

    def identify(self, source: Any) -> str:
        """Stable identifier for *source*; also the handler class name."""
        ...

    def group(self, source: Any) -> GroupDescriptor | None:
        """The group declared on *source*, or ``None`` when it declares no routes."""
        ...

    def actions(self, source: Any) -> Iterable[str]:
        """Action names of *source*, in declaration order."""
        ...

    def maps(self, source: Any, action: str) -> Sequence[MapDeclaration]:
        """Explicit ``(rule, methods)`` declarations of *action*; may be empty."""
        ...

    def components(self, source: Any, action: str | None = None) -> Components:
        """Components declared on the group (``action=None``) or on one action."""
        ...
