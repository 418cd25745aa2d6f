"""Dependency Injection Container for devium.

The container wires the page resolution context to its storage adapters,
one set per app:
- UnitRegistry backed by the app's pages.yaml
- YamlLayerSource backed by the app's ui_map directory
- PageResolver and PageBuilder
- Secret and permission stores

Usage:
    from devium.container import get_container

    container = get_container()
    device = container.create_device({"app": "Shop", "platform": "android",
                                      "platform_version": "12"})
    page = device.open_page("Login")
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from devium.adapters.yaml_sources import YamlLayerSource, YamlUnitSource
from devium.components.device import Device
from devium.components.page import PageBuilder
from devium.components.secrets import SecretStore
from devium.components.units import UnitCatalog, default_catalog
from devium.domains.page_resolution import (
    DeviceDescriptor,
    EventPublisher,
    PageResolver,
    UnitRegistry,
)
from devium.models.config_models import DeviumConfig

logger = logging.getLogger(__name__)

# Singleton container instance
_container: Optional["ServiceContainer"] = None


@dataclass
class ServiceContainer:
    """Simple dependency injection container for the per-app services.

    Attributes:
        config: Storage layout and detection settings
        catalog: Behavior implementations used by every page builder
        event_publisher: Optional sink for page resolution events

    App-scoped services (keyed by app name):
        - Unit registries and page resolvers
        - Secret and permission stores
    """
    config: DeviumConfig = field(default_factory=DeviumConfig.from_env)
    catalog: UnitCatalog = field(default_factory=lambda: default_catalog)
    event_publisher: Optional[EventPublisher] = None

    _resolvers: Dict[str, PageResolver] = field(default_factory=dict, repr=False)
    _secrets: Dict[str, SecretStore] = field(default_factory=dict, repr=False)
    _permissions: Dict[str, SecretStore] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get_resolver(self, app: str) -> PageResolver:
        """Get or create the page resolver of an app."""
        with self._lock:
            if app not in self._resolvers:
                app_dir = self.config.app_dir(app)
                cache = self.config.CACHE_DOCUMENTS
                self._resolvers[app] = PageResolver(
                    registry=UnitRegistry(
                        source=YamlUnitSource(app_dir, self.config.PAGES_FILE, cache=cache)
                    ),
                    layers=YamlLayerSource(
                        os.path.join(app_dir, self.config.UI_MAP_DIR), cache=cache
                    ),
                    event_publisher=self.event_publisher,
                )
                logger.debug("Created page resolver for app %s at %s", app, app_dir)
            return self._resolvers[app]

    def get_registry(self, app: str) -> UnitRegistry:
        return self.get_resolver(app).registry

    def get_page_builder(self, app: str) -> PageBuilder:
        return PageBuilder(resolver=self.get_resolver(app), catalog=self.catalog)

    def get_secret_store(self, app: str) -> SecretStore:
        """Get the credentials of an app (empty if it has no secrets file)."""
        if app not in self._secrets:
            path = os.path.join(self.config.app_dir(app), self.config.SECRETS_FILE)
            self._secrets[app] = SecretStore.from_file(path)
        return self._secrets[app]

    def get_permission_store(self, app: str) -> SecretStore:
        """Get the permission sets of an app."""
        if app not in self._permissions:
            path = os.path.join(self.config.app_dir(app), self.config.PERMISSIONS_FILE)
            self._permissions[app] = SecretStore.from_file(path)
        return self._permissions[app]

    def describe(self, device_info: Union[DeviceDescriptor, Mapping[str, Any]]) -> DeviceDescriptor:
        """Normalize device info into a descriptor using the configured TV markers."""
        if isinstance(device_info, DeviceDescriptor):
            return device_info
        return DeviceDescriptor.from_device_info(
            device_info, tv_markers=tuple(self.config.TV_MARKERS)
        )

    def create_device(
        self,
        device_info: Union[DeviceDescriptor, Mapping[str, Any]],
        driver: Any = None,
    ) -> Device:
        """Create a Device wired to its app's services."""
        descriptor = self.describe(device_info)
        return Device(
            descriptor=descriptor,
            builder=self.get_page_builder(descriptor.app),
            driver=driver,
            secrets=self.get_secret_store(descriptor.app),
            permissions=self.get_permission_store(descriptor.app),
        )

    def clear_app(self, app: str) -> None:
        """Drop the cached services of an app, e.g. after its files changed."""
        with self._lock:
            self._resolvers.pop(app, None)
        self._secrets.pop(app, None)
        self._permissions.pop(app, None)
        logger.debug("Cleared container data for app %s", app)


def get_container() -> ServiceContainer:
    """Get the singleton service container.

    Returns:
        The shared ServiceContainer instance
    """
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def set_container(container: ServiceContainer) -> None:
    """Replace the singleton container (e.g. with a configured one)."""
    global _container
    _container = container


def reset_container() -> None:
    """Reset the container (for testing).

    Clears the singleton instance so a fresh container is created
    on next get_container() call.
    """
    global _container
    _container = None
