"""Source resolution — builds a loaded Router from command line sources.

Shared by ``taproute routes`` and ``taproute match``. A source is either a
YAML declaration file or a ``"module:Class"`` import string.
"""

import importlib
import sys
from pathlib import Path

from taproute.discovery.mapping import MappingProvider
from taproute.errors import ConfigurationError
from taproute.routing.router import Router

YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def resolve_class(import_string: str) -> type:
    """Resolve ``"module:Class"`` (or ``"module.Class"``) to a class.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a class.
    """
    module_path, sep, attr_name = import_string.partition(":")
    if not sep:
        module_path, _, attr_name = import_string.rpartition(".")
    if not module_path or not attr_name:
        msg = f"{import_string!r} is not a 'module:Class' import string"
        raise TypeError(msg)

    obj: object = importlib.import_module(module_path)
    for part in attr_name.split("."):
        obj = getattr(obj, part)

    if not isinstance(obj, type):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a class"
        raise TypeError(msg)
    return obj


def build_router(sources: list[str]) -> Router:
    """Load every source into one router, in command line order."""
    router = Router()
    annotations = router.provider
    for source in sources:
        if Path(source).suffix in YAML_SUFFIXES:
            provider = MappingProvider.from_yaml(source)
            router.provider = provider
            router.load_all(provider.sources())
        else:
            router.provider = annotations
            router.load(resolve_class(source))
    return router


def build_router_or_exit(sources: list[str]) -> Router:
    """:func:`build_router`, reporting failures on stderr with exit status 1."""
    try:
        return build_router(sources)
    except (ModuleNotFoundError, AttributeError, TypeError, OSError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
