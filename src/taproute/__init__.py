"""taproute — declarative HTTP route compilation and dispatch.

Declare routes on classes, load them into a router, and resolve incoming
``(path, method, domain)`` tuples to a route plus extracted parameters.

Basic usage::

    from taproute import Router, controller, route, where

    @controller("users")
    class Users:
        @route("{id}", methods=["GET"])
        @where(id=r"\\d+")
        def show(self): ...

    router = Router()
    router.load(Users)
    match = router.search("/users/42", "GET")
    match.route.handler   # NamedHandler("app.Users::show")
    match.arguments       # {"id": "42"}

Declarations as data (YAML)::

    from taproute import MappingProvider, Router

    provider = MappingProvider.from_yaml("routes.yaml")
    router = Router(provider)
    router.load_all(provider.sources())
"""

__version__ = "0.1.0"
__all__ = [
    "AnnotationProvider",
    "CallableHandler",
    "Components",
    "ConfigurationError",
    "Controller",
    "DeclarationProvider",
    "GroupDescriptor",
    "GroupKind",
    "MapDeclaration",
    "MappingProvider",
    "NamedHandler",
    "NotFound",
    "PatternError",
    "Resource",
    "Route",
    "RouteMatch",
    "Router",
    "RouterConfig",
    "Tap",
    "TaprouteError",
    "any_method",
    "cache",
    "compile_rule",
    "controller",
    "delete",
    "domains",
    "get",
    "many",
    "middlewares",
    "patch",
    "post",
    "put",
    "resource",
    "route",
    "where",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import taproute`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from taproute.routing.router import Router

        return Router

    if name == "RouterConfig":
        from taproute.config import RouterConfig

        return RouterConfig

    if name == "compile_rule":
        from taproute.routing.pattern import compile_rule

        return compile_rule

    if name in ("CallableHandler", "NamedHandler", "Route", "RouteMatch"):
        from taproute.routing import route as _route

        return getattr(_route, name)

    if name in ("Tap", "get", "post", "put", "patch", "delete", "any_method", "many"):
        from taproute.routing import tap as _tap

        return getattr(_tap, name)

    if name in ("Controller", "Resource"):
        from taproute.routing import group as _group

        return getattr(_group, name)

    if name in ("controller", "resource", "route", "domains", "middlewares", "where", "cache"):
        from taproute import decorators as _decorators

        return getattr(_decorators, name)

    if name in ("Components", "GroupDescriptor", "GroupKind", "MapDeclaration"):
        from taproute.discovery import types as _types

        return getattr(_types, name)

    if name == "DeclarationProvider":
        from taproute.discovery.protocol import DeclarationProvider

        return DeclarationProvider

    if name == "AnnotationProvider":
        from taproute.discovery.annotations import AnnotationProvider

        return AnnotationProvider

    if name == "MappingProvider":
        from taproute.discovery.mapping import MappingProvider

        return MappingProvider

    if name in ("TaprouteError", "ConfigurationError", "PatternError", "NotFound"):
        from taproute import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
