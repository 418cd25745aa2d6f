"""Tests for the service container."""

from devium.container import ServiceContainer, get_container, reset_container, set_container
from devium.domains.page_resolution import DeviceDescriptor, PageResolver
from devium.models.config_models import DeviumConfig


class RecordingPublisher:
    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)


class TestServiceContainer:
    __test__ = True

    def test_resolver_is_cached_per_app(self, container):
        resolver = container.get_resolver("Shop")
        assert isinstance(resolver, PageResolver)
        assert container.get_resolver("Shop") is resolver
        assert container.get_registry("Shop") is resolver.registry

    def test_registry_reads_pages_file(self, container):
        assert container.get_registry("Shop").pages() == ["Login", "Home", "Checkout", "Settings"]

    def test_describe_uses_configured_tv_markers(self, apps_root):
        container = ServiceContainer(
            config=DeviumConfig(APPS_ROOT=str(apps_root), TV_MARKERS=("stick",))
        )
        descriptor = container.describe({
            "app": "Shop", "platform": "android", "platform_version": "9",
            "applicationName": "Shop Stick",
        })
        assert descriptor.tv == "TV"
        assert container.describe(descriptor) is descriptor

    def test_create_device_resolves_pages(self, container, samsung_11_info):
        device = container.create_device(samsung_11_info)
        page = device.open_page("Login")

        assert page.mods == ["Android_9", "Android_10", "Samsung_4_0", "Shop_2_0"]
        assert page.locator("login.password") == "samsung/pass"
        assert isinstance(device.descriptor, DeviceDescriptor)

    def test_event_publisher_is_wired(self, apps_root, android_12_info):
        publisher = RecordingPublisher()
        container = ServiceContainer(
            config=DeviumConfig(APPS_ROOT=str(apps_root)), event_publisher=publisher,
        )
        container.create_device(android_12_info).open_page("Home")
        assert publisher.events

    def test_clear_app(self, container):
        resolver = container.get_resolver("Shop")
        store = container.get_secret_store("Shop")
        container.clear_app("Shop")
        assert container.get_resolver("Shop") is not resolver
        assert container.get_secret_store("Shop") is not store

    def test_missing_app_has_no_pages(self, container):
        assert container.get_registry("Unknown").pages() == []
        assert container.get_secret_store("Unknown").handles() == []


class TestContainerSingleton:
    __test__ = True

    def test_set_and_reset(self, apps_root):
        configured = ServiceContainer(config=DeviumConfig(APPS_ROOT=str(apps_root)))
        set_container(configured)
        assert get_container() is configured

        reset_container()
        fresh = get_container()
        assert fresh is not configured
        reset_container()
