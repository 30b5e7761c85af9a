"""Tests for taproute.discovery.mapping — data and YAML declarations."""

from pathlib import Path

import pytest

from taproute.decorators import cache, controller, domains, middlewares, resource, route, where
from taproute.discovery.mapping import MappingProvider
from taproute.discovery.protocol import DeclarationProvider
from taproute.discovery.types import Components, GroupDescriptor, GroupKind, MapDeclaration
from taproute.errors import ConfigurationError
from taproute.routing.route import NamedHandler
from taproute.routing.router import Router

ROUTES_YAML = """\
groups:
  shop.Widgets:
    kind: resource
    domains: [a.com]
    cache: 60
    actions:
      index: {}
      show:
        cache: 30
      publish: {}
  shop.Pages:
    prefix: pages
    middlewares: [auth]
    actions:
      about:
      faq:
        middlewares:
          - throttle: [10]
        routes:
          - rule: "faq/{topic?}"
            methods: [get]
          - rule: "help/{topic?}"
            methods: GET
      show:
        where:
          id: '\\d+'
        routes:
          - rule: "{id}"
"""


@pytest.fixture
def routes_file(tmp_path: Path) -> Path:
    path = tmp_path / "routes.yaml"
    path.write_text(ROUTES_YAML, encoding="utf-8")
    return path


@pytest.fixture
def provider(routes_file: Path) -> MappingProvider:
    return MappingProvider.from_yaml(routes_file)


class TestDeclarations:
    def test_satisfies_protocol(self, provider: MappingProvider) -> None:
        assert isinstance(provider, DeclarationProvider)

    def test_sources(self, provider: MappingProvider) -> None:
        assert provider.sources() == ["shop.Widgets", "shop.Pages"]
        assert provider.identify("shop.Pages") == "shop.Pages"

    def test_groups(self, provider: MappingProvider) -> None:
        assert provider.group("shop.Widgets") == GroupDescriptor(GroupKind.RESOURCE, None)
        assert provider.group("shop.Pages") == GroupDescriptor(GroupKind.CONTROLLER, "pages")

    def test_actions(self, provider: MappingProvider) -> None:
        assert provider.actions("shop.Pages") == ["about", "faq", "show"]

    def test_maps(self, provider: MappingProvider) -> None:
        assert provider.maps("shop.Pages", "about") == ()
        assert provider.maps("shop.Pages", "faq") == (
            MapDeclaration("faq/{topic?}", ("GET",)),
            MapDeclaration("help/{topic?}", ("GET",)),
        )
        assert provider.maps("shop.Pages", "show") == (MapDeclaration("{id}", ("GET", "POST")),)

    def test_components(self, provider: MappingProvider) -> None:
        assert provider.components("shop.Widgets") == Components(
            domains=("a.com",), cache_duration=60
        )
        assert provider.components("shop.Widgets", "show") == Components(cache_duration=30)
        assert provider.components("shop.Pages", "faq").middlewares == {"throttle": (10,)}
        assert provider.components("shop.Pages", "show").constraints == {"id": r"\d+"}
        assert provider.components("shop.Pages", "about") == Components()


class TestLoading:
    def test_router_lookup(self, provider: MappingProvider) -> None:
        router = Router(provider)
        router.load_all(provider.sources())

        match = router.search("/widgets/42", "GET", "a.com")
        assert match.route.handler == NamedHandler("shop.Widgets::show")
        assert match.route.cache_duration == 30
        assert router.search("/widgets/0", "GET", "a.com") is None

        match = router.search("pages/help/billing", "GET")
        assert match.arguments == {"topic": "billing"}
        assert dict(match.route.middlewares) == {"throttle": (10,), "auth": ()}

        assert router.search("pages/7", "POST").route.handler == NamedHandler("shop.Pages::show")
        assert router.search("pages/x", "POST") is None

    def test_idempotent(self, provider: MappingProvider) -> None:
        router = Router(provider)
        router.load_all(provider.sources())
        before = router.routes
        router.load_all(provider.sources())
        assert router.routes == before


class TestEquivalence:
    def test_matches_decorator_declarations(self, provider: MappingProvider) -> None:
        @resource()
        @domains("a.com")
        @cache(60)
        class Widgets:
            def index(self) -> None: ...

            @cache(30)
            def show(self) -> None: ...

            def publish(self) -> None: ...

        @controller("pages")
        @middlewares("auth")
        class Pages:
            def about(self) -> None: ...

            @route("faq/{topic?}", methods=["GET"])
            @route("help/{topic?}", methods=["GET"])
            @middlewares(throttle=[10])
            def faq(self) -> None: ...

            @route("{id}")
            @where(id=r"\d+")
            def show(self) -> None: ...

        def table(router: Router) -> list[tuple]:
            return [
                (
                    domain,
                    method,
                    r.rule,
                    r.handler.method_name,
                    dict(r.constraints),
                    dict(r.middlewares),
                    r.cache_duration,
                )
                for domain, method, r in router.entries()
            ]

        from_yaml = Router(provider)
        from_yaml.load_all(provider.sources())
        from_classes = Router()
        from_classes.load_all([Widgets, Pages])

        assert table(from_yaml) == table(from_classes)


class TestInvalidDocuments:
    def test_missing_groups(self) -> None:
        with pytest.raises(ConfigurationError, match="groups"):
            MappingProvider({"routes": {}})

    def test_groups_not_a_mapping(self) -> None:
        with pytest.raises(ConfigurationError, match="mapping"):
            MappingProvider({"groups": ["a", "b"]})

    def test_unknown_kind(self) -> None:
        provider = MappingProvider({"groups": {"G": {"kind": "viewset"}}})
        with pytest.raises(ConfigurationError, match="kind"):
            provider.group("G")

    def test_bad_cache(self) -> None:
        provider = MappingProvider({"groups": {"G": {"cache": -1}}})
        with pytest.raises(ConfigurationError, match="cache"):
            provider.components("G")

    def test_bad_domains(self) -> None:
        provider = MappingProvider({"groups": {"G": {"domains": [1, 2]}}})
        with pytest.raises(ConfigurationError, match="domains"):
            provider.components("G")

    def test_bad_middleware_entry(self) -> None:
        provider = MappingProvider({"groups": {"G": {"middlewares": [["auth"]]}}})
        with pytest.raises(ConfigurationError, match="middleware"):
            provider.components("G")

    def test_unknown_group(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown"):
            MappingProvider({"groups": {}}).group("G")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.yaml"
        path.write_text("groups: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="invalid YAML"):
            MappingProvider.from_yaml(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="groups"):
            MappingProvider.from_yaml(path)

    def test_load_error_names_group(self) -> None:
        provider = MappingProvider(
            {
                "groups": {
                    "G": {
                        "actions": {
                            "show": {"where": {"id": "[0-9"}, "routes": [{"rule": "{id}"}]}
                        }
                    }
                }
            }
        )
        router = Router(provider)
        with pytest.raises(ConfigurationError, match="from G"):
            router.load("G")

    def test_rule_not_a_string(self) -> None:
        provider = MappingProvider(
            {"groups": {"G": {"actions": {"missing": {"routes": [{"rule": 404}]}}}}}
        )
        with pytest.raises(ConfigurationError, match="rule: expected a string"):
            provider.maps("G", "missing")

    def test_rule_not_a_string_leaves_group_retryable(self) -> None:
        document = {"groups": {"G": {"actions": {"missing": {"routes": [{"rule": 404}]}}}}}
        router = Router(MappingProvider(document))
        with pytest.raises(ConfigurationError, match="from G"):
            router.load("G")
        assert "G" not in router.loaded
        assert len(router) == 0
