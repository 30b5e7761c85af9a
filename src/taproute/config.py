"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, shared by the
router, the group controllers it builds, and the declaration providers.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(default_methods=("GET",))
    """

    # Methods for members that carry no explicit route declaration
    default_methods: tuple[str, ...] = ("GET", "POST")

    # Constraint applied to ``{id}`` on show/edit/update/destroy resource actions
    resource_id_pattern: str = r"[1-9]\d*"

    # Trailing class-identifier components used when a group declares no prefix
    default_prefix_level: int = 1
