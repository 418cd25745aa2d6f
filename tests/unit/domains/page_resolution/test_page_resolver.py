"""Tests for the PageResolver domain service."""

from typing import Any, List, Mapping, Optional

import pytest

from devium.domains.page_resolution import (
    ChainBuilt,
    DeviceDescriptor,
    Dimension,
    ImproperHierarchy,
    LayerSource,
    LocatorMapMerged,
    NoApplicableVersion,
    PageResolver,
    UnitRegistry,
    UnitsFiltered,
    UnknownUnit,
    VersionAdjusted,
    thaw,
)


class MockEventPublisher:
    def __init__(self):
        self.events: List[object] = []

    def publish(self, event: object) -> None:
        self.events.append(event)

    def of_type(self, event_type):
        return [event for event in self.events if isinstance(event, event_type)]


class MockLayerSource:
    def __init__(self, documents):
        self.documents = documents
        self.requested: List[str] = []

    def load_layer_document(self, tag: str) -> Optional[Mapping[str, Any]]:
        self.requested.append(tag)
        return self.documents.get(tag)


LAYERS = {
    "Android": {
        "9": {"login": {"username": "id/user", "password": "id/pass"}},
        "10": {"login": {"username": "id/username"}},
        "12_1": {"login": {"submit": "id/sign_in"}},
    },
    "Samsung": {"4_0": {"login": {"password": "samsung/pass"}}},
}


@pytest.fixture
def registry():
    registry = UnitRegistry()
    registry.declare("Login", ["Android_9", "Android_10", "Samsung_4_0", "Android_12_1"])
    registry.declare("Broken", ["Android_10", "Android_9"])
    registry.declare("Scenario", ["platform_1_0", "platform_2_0", "vendor_1_0"])
    registry.declare("Settings", [])
    return registry


@pytest.fixture
def events():
    return MockEventPublisher()


@pytest.fixture
def resolver(registry, events):
    return PageResolver(
        registry=registry, layers=MockLayerSource(LAYERS), event_publisher=events,
    )


def _device(platform_version="12.1", **kwargs):
    return DeviceDescriptor(
        app="Shop", platform="Android", platform_version=platform_version, **kwargs
    )


class TestPageResolver:
    __test__ = True

    def test_latest_platform(self, resolver):
        resolution = resolver.resolve("Login", _device("12.1"))

        assert resolution.chain_names == ["Android_9", "Android_10", "Android_12_1"]
        assert resolution.locator("login.username") == "id/username"
        assert resolution.locator("login.submit") == "id/sign_in"
        assert resolution.resolved_versions[Dimension.PLATFORM].version == "12.1"

    def test_platform_adjusted_and_vendor_skin(self, resolver):
        device = _device("11", vendor="Samsung", vendor_version="4.5")
        resolution = resolver.resolve("Login", device)

        assert resolution.chain_names == ["Android_9", "Android_10", "Samsung_4_0"]
        assert resolution.locator("login.password") == "samsung/pass"
        assert resolution.resolved_versions[Dimension.PLATFORM].version == "10"
        assert resolution.resolved_versions[Dimension.VENDOR].version == "4.0"

    def test_unit_list_excludes_other_dimensions(self, resolver):
        resolution = resolver.resolve("Login", _device("10"))
        assert [unit.name for unit in resolution.units] == [
            "Android_9", "Android_10", "Android_12_1",
        ]
        assert resolution.chain_names == ["Android_9", "Android_10"]

    def test_absent_vendor_leaves_only_platform_pin(self, registry):
        resolver = PageResolver(registry=registry)
        device = DeviceDescriptor(app="Shop", platform="platform", platform_version="1.5")

        resolution = resolver.resolve("Scenario", device)

        assert resolution.chain_names == ["platform_1_0"]
        assert dict(resolution.locator_map) == {}

    def test_improper_hierarchy_aborts(self, resolver, events):
        with pytest.raises(ImproperHierarchy):
            resolver.resolve("Broken", _device())
        assert events.of_type(ChainBuilt) == []

    def test_device_older_than_every_unit(self, resolver):
        with pytest.raises(NoApplicableVersion) as exc_info:
            resolver.resolve("Login", _device("8"))
        assert exc_info.value.dimension is Dimension.PLATFORM

    def test_unknown_page(self, resolver):
        with pytest.raises(UnknownUnit):
            resolver.resolve("Cart", _device())

    def test_page_without_units(self, resolver):
        resolution = resolver.resolve("Settings", _device())
        assert resolution.chain == ()
        assert dict(resolution.locator_map) == {}

    def test_layer_loader_override(self, resolver):
        resolution = resolver.resolve(
            "Login", _device("9"), layer_loader=lambda tag: {"9": {"title": tag}},
        )
        assert resolution.locator("title") == "Android"

    def test_missing_locator_raises_key_error(self, resolver):
        resolution = resolver.resolve("Login", _device("9"))
        with pytest.raises(KeyError):
            resolution.locator("login.submit")
        with pytest.raises(KeyError):
            resolution.locator("login.username.text")

    def test_same_inputs_same_result(self, resolver):
        first = resolver.resolve("Login", _device("11"))
        second = resolver.resolve("Login", _device("11"))
        assert first.chain == second.chain
        assert thaw(first.locator_map) == thaw(second.locator_map)

    def test_to_dict(self, resolver):
        data = resolver.resolve("Login", _device("11")).to_dict()
        assert data["page"] == "Login"
        assert data["chain"] == ["Android_9", "Android_10"]
        assert data["resolved_versions"] == {"app": None, "platform": "10"}
        assert data["locator_map"] == {
            "login": {"username": "id/username", "password": "id/pass"},
        }

    def test_layer_source_satisfies_protocol(self):
        assert isinstance(MockLayerSource({}), LayerSource)


class TestPageResolverEvents:
    __test__ = True

    def test_events_in_order(self, resolver, events):
        resolver.resolve("Login", _device("11"))

        assert [type(event) for event in events.events] == [
            UnitsFiltered, VersionAdjusted, ChainBuilt, LocatorMapMerged,
        ]

    def test_units_filtered_reports_dropped(self, resolver, events):
        resolver.resolve("Login", _device("12.1"))

        filtered = events.of_type(UnitsFiltered)[0]
        assert filtered.declared == 4
        assert filtered.dropped == ("Samsung_4_0",)

    def test_version_adjusted(self, resolver, events):
        resolver.resolve("Login", _device("11"))

        adjusted = events.of_type(VersionAdjusted)[0]
        assert (adjusted.dimension, adjusted.requested, adjusted.resolved) == (
            "platform", "11", "10",
        )

    def test_no_adjustment_event_for_exact_version(self, resolver, events):
        resolver.resolve("Login", _device("10"))
        assert events.of_type(VersionAdjusted) == []
