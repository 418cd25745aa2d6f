"""Page composition components: units, pages, devices and secrets."""

from devium.components.device import Device
from devium.components.page import Page, PageBuilder, method_name
from devium.components.secrets import SecretNotFound, SecretStore
from devium.components.units import BehaviorUnit, UnitCatalog, default_catalog

__all__ = [
    "BehaviorUnit",
    "Device",
    "Page",
    "PageBuilder",
    "SecretNotFound",
    "SecretStore",
    "UnitCatalog",
    "default_catalog",
    "method_name",
]
