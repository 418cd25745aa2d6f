"""Devium - version-aware page composition for app test automation."""

from devium.components import Device, Page, PageBuilder  # noqa: F401
from devium.domains.page_resolution import (  # noqa: F401
    DeviceDescriptor,
    PageResolution,
    PageResolver,
)

__all__ = [
    "Device",
    "DeviceDescriptor",
    "Page",
    "PageBuilder",
    "PageResolution",
    "PageResolver",
]

__version__ = "0.1.0"
