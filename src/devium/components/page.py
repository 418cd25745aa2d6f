"""Composed app pages.

A Page is built once per device and page name. Its chain, locator map and
behavior units are fixed at construction; navigating to another page
builds a new Page.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Mapping, Tuple

from devium.components.units import BASE_ATTRIBUTES, BehaviorUnit, UnitCatalog
from devium.domains.page_resolution import (
    DeviceDescriptor,
    PageResolution,
    PageResolver,
    UnknownUnit,
)

if TYPE_CHECKING:
    from devium.components.device import Device

logger = logging.getLogger(__name__)

_MISSING = object()


def method_name(page_name: str) -> str:
    """Snake-case form of a page name used in ``goto_page_*`` handlers.

    Examples:
        >>> method_name("ProductDetails")
        'product_details'
    """
    return re.sub(r"(?<!^)(?=[A-Z])", "_", page_name).lower()


class Page:
    """An app page composed from the behavior units of its chain.

    Attributes:
        device: The device the page belongs to
        resolution: The resolution the page was built from
    """

    def __init__(
        self,
        device: "Device",
        resolution: PageResolution,
        catalog: UnitCatalog,
    ) -> None:
        self.device = device
        self.resolution = resolution
        self._behaviors: Tuple[BehaviorUnit, ...] = tuple(
            implementation(self)
            for implementation in catalog.implementations(
                resolution.device.app, resolution.page, resolution.chain
            )
        )

    @property
    def name(self) -> str:
        return self.resolution.page

    @property
    def mods(self) -> List[str]:
        """Names of the chain units the page is composed of."""
        return self.resolution.chain_names

    @property
    def ui_map(self) -> Mapping[str, Any]:
        return self.resolution.locator_map

    @property
    def behaviors(self) -> Tuple[BehaviorUnit, ...]:
        return self._behaviors

    def locator(self, path: str) -> Any:
        return self.resolution.locator(path)

    def capability(self, name: str) -> Any:
        """Return the latest chain unit's attribute called ``name``.

        Raises:
            AttributeError: If no unit of the page provides it
        """
        if name.startswith("_") or name in BASE_ATTRIBUTES:
            raise AttributeError(name)
        for behavior in reversed(self.__dict__.get("_behaviors", ())):
            value = getattr(behavior, name, _MISSING)
            if value is not _MISSING:
                return value
        raise AttributeError(
            f"Page '{self.name}' has no capability '{name}' "
            f"(units: {', '.join(self.mods) or 'none'})"
        )

    def responds_to(self, name: str) -> bool:
        try:
            self.capability(name)
        except AttributeError:
            return False
        return True

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or "resolution" not in self.__dict__:
            raise AttributeError(name)
        return self.capability(name)

    def goto(self, page_name: str, *args: Any, **kwargs: Any) -> Any:
        """Navigate to another page of the same app.

        The current page must provide a ``goto_page_<snake_name>`` handler.
        The target page is built, becomes the device's current page, and
        is passed to the handler.

        Raises:
            UnknownUnit: If there is no handler or the target page is not
                declared for the app
        """
        handler_name = f"goto_page_{method_name(page_name)}"
        if not self.responds_to(handler_name) or not self.device.has_page(page_name):
            raise UnknownUnit(page_name, self.name)
        page = self.device.open_page(page_name)
        logger.debug("Navigating %s -> %s", self.name, page_name)
        return self.capability(handler_name)(page, *args, **kwargs)

    def __repr__(self) -> str:
        return f"Page(name={self.name!r}, mods={self.mods!r})"


@dataclass
class PageBuilder:
    """Builds pages: resolves the chain, then activates its behavior units."""
    resolver: PageResolver
    catalog: UnitCatalog

    def resolve(self, page_name: str, descriptor: DeviceDescriptor) -> PageResolution:
        return self.resolver.resolve(page_name, descriptor)

    def build(self, page_name: str, device: "Device") -> Page:
        """Build ``page_name`` for ``device``.

        Raises:
            PageResolutionError: If resolution fails; no page is built
        """
        resolution = self.resolve(page_name, device.descriptor)
        return Page(device, resolution, self.catalog)

    def has_page(self, page_name: str) -> bool:
        return self.resolver.registry.has_page(page_name)
