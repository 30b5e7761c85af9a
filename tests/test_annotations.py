"""Tests for taproute.discovery.annotations — the decorator-backed provider."""

import pytest

from taproute.decorators import cache, controller, domains, middlewares, resource, route, where
from taproute.discovery.annotations import AnnotationProvider
from taproute.discovery.protocol import DeclarationProvider
from taproute.discovery.types import Components, GroupDescriptor, GroupKind, MapDeclaration
from taproute.errors import ConfigurationError


@controller("base")
@domains("a.com")
class Base:
    def list(self) -> None: ...

    @route("shared/{id}", methods=["GET"])
    def shared(self) -> None: ...


@resource()
@cache(60)
class Child(Base):
    @where(id=r"\d+")
    @middlewares("auth")
    def show(self) -> None: ...

    def shared(self) -> None: ...

    @staticmethod
    def helper() -> None: ...

    def _internal(self) -> None: ...

    name = "not a method"


@pytest.fixture
def provider() -> AnnotationProvider:
    return AnnotationProvider()


class TestProtocol:
    def test_satisfies_protocol(self, provider: AnnotationProvider) -> None:
        assert isinstance(provider, DeclarationProvider)


class TestIdentify:
    def test_dotted_path(self, provider: AnnotationProvider) -> None:
        assert provider.identify(Child) == f"{Child.__module__}.Child"

    def test_rejects_instances(self, provider: AnnotationProvider) -> None:
        with pytest.raises(ConfigurationError):
            provider.identify(Child())


class TestGroup:
    def test_own_group(self, provider: AnnotationProvider) -> None:
        assert provider.group(Child) == GroupDescriptor(GroupKind.RESOURCE, None)
        assert provider.group(Base) == GroupDescriptor(GroupKind.CONTROLLER, "base")

    def test_no_group(self, provider: AnnotationProvider) -> None:
        class Plain:
            pass

        assert provider.group(Plain) is None


class TestActions:
    def test_own_methods_first_then_inherited(self, provider: AnnotationProvider) -> None:
        assert provider.actions(Child) == ["show", "shared", "helper", "list"]

    def test_base_actions(self, provider: AnnotationProvider) -> None:
        assert provider.actions(Base) == ["list", "shared"]


class TestMaps:
    def test_explicit(self, provider: AnnotationProvider) -> None:
        assert provider.maps(Base, "shared") == (MapDeclaration("shared/{id}", ("GET",)),)

    def test_override_drops_parent_declarations(self, provider: AnnotationProvider) -> None:
        assert provider.maps(Child, "shared") == ()

    def test_inherited_member(self, provider: AnnotationProvider) -> None:
        assert provider.maps(Child, "list") == ()

    def test_unknown_action(self, provider: AnnotationProvider) -> None:
        with pytest.raises(ConfigurationError, match="missing"):
            provider.maps(Child, "missing")


class TestComponents:
    def test_group_components_not_inherited(self, provider: AnnotationProvider) -> None:
        assert provider.components(Child) == Components(cache_duration=60)
        assert provider.components(Base) == Components(domains=("a.com",))

    def test_action_components(self, provider: AnnotationProvider) -> None:
        components = provider.components(Child, "show")
        assert components.constraints == {"id": r"\d+"}
        assert components.middlewares == {"auth": ()}
        assert components.domains == ()
        assert components.cache_duration == 0

    def test_undecorated_action(self, provider: AnnotationProvider) -> None:
        assert provider.components(Child, "list") == Components()
