"""Page Resolution Domain Service.

The PageResolver runs one complete resolution pass for a page and a
device. It coordinates between:
- UnitRegistry (declarations, filtering, hierarchy validation)
- VersionResolver (nearest supported version per dimension)
- ChainBuilder (ordered unit selection)
- ConfigLayerer (effective locator map)

A pass either completes and returns a PageResolution, or raises; no
partially resolved page is ever returned.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

from .aggregates import UnitRegistry
from .chain_builder import Chain, ChainBuilder, chain_names
from .config_layerer import ConfigLayerer, LayerLoader, thaw
from .events import ChainBuilt, LocatorMapMerged, UnitsFiltered, VersionAdjusted
from .repository import LayerSource
from .value_objects import (
    DeviceDescriptor,
    Dimension,
    ResolvedVersion,
    UnitIdentifier,
)
from .version_resolver import VersionResolver

logger = logging.getLogger(__name__)


class EventPublisher(Protocol):
    """Protocol for publishing domain events."""
    def publish(self, event: object) -> None: ...


@dataclass(frozen=True)
class PageResolution:
    """Outcome of resolving one page for one device.

    Attributes:
        page: The page name
        device: The descriptor the page was resolved for
        units: The filtered, validated unit list
        resolved_versions: Resolved version per gated dimension
        chain: The ordered units to compose
        locator_map: The effective, read-only locator map
    """
    page: str
    device: DeviceDescriptor
    units: Tuple[UnitIdentifier, ...]
    resolved_versions: Mapping[Dimension, ResolvedVersion]
    chain: Chain
    locator_map: Mapping[str, Any]

    @property
    def chain_names(self) -> List[str]:
        return chain_names(self.chain)

    def locator(self, path: str) -> Any:
        """Look up a dotted path (``login.username``) in the locator map.

        Raises:
            KeyError: If any segment of the path is missing
        """
        node: Any = self.locator_map
        for segment in path.split("."):
            if not isinstance(node, Mapping) or segment not in node:
                raise KeyError(
                    f"Locator '{path}' not found on page '{self.page}'"
                )
            node = node[segment]
        return node

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view, e.g. for MCP tool responses."""
        return {
            "page": self.page,
            "units": [unit.name for unit in self.units],
            "resolved_versions": {
                dimension.value: resolved.version
                for dimension, resolved in self.resolved_versions.items()
            },
            "chain": self.chain_names,
            "locator_map": thaw(self.locator_map),
        }


@dataclass
class PageResolver:
    """Resolves the unit chain and locator map of a page for a device.

    Usage:

        resolver = PageResolver(registry=registry, layers=layer_source)
        resolution = resolver.resolve("Login", descriptor)
        resolution.chain_names      # ["Android_9", "Android_10"]
        resolution.locator("login.username")
    """
    registry: UnitRegistry
    layers: Optional[LayerSource] = None
    version_resolver: VersionResolver = field(default_factory=VersionResolver)
    chain_builder: ChainBuilder = field(default_factory=ChainBuilder)
    config_layerer: ConfigLayerer = field(default_factory=ConfigLayerer)
    event_publisher: Optional[EventPublisher] = None

    def resolve(
        self,
        page: str,
        device: DeviceDescriptor,
        layer_loader: Optional[LayerLoader] = None,
    ) -> PageResolution:
        """Run one resolution pass.

        Args:
            page: The page to resolve
            device: The device descriptor
            layer_loader: Overrides the configured layer source

        Returns:
            The complete PageResolution

        Raises:
            UnknownUnit: If the page is not declared
            MalformedUnitIdentifier: If a relevant declaration is malformed
            ImproperHierarchy: If a dimension's declarations decrease
            NoApplicableVersion: If the device is older than every unit
                declared for one of its dimensions
        """
        declared = self.registry.load_units(page)
        dimension_values = device.dimension_values()

        # Step 1: filter and validate
        units = self.registry.filter_valid(declared, dimension_values)
        kept = tuple(unit.name for unit in units)
        self._publish(UnitsFiltered(
            page=page,
            declared=len(declared),
            kept=kept,
            dropped=tuple(name for name in declared if name not in kept),
        ))

        # Step 2: resolve versions
        resolved_versions = self._resolve_versions(page, device, dimension_values, units)

        # Step 3: chain
        chain = self.chain_builder.build(units, resolved_versions)
        self._publish(ChainBuilt(page=page, chain=tuple(chain_names(chain))))

        # Step 4: locator map
        loader = layer_loader or self._default_loader
        locator_map = self.config_layerer.merge(chain, loader)
        self._publish(LocatorMapMerged(
            page=page, units=len(chain), keys=tuple(locator_map),
        ))

        logger.info(
            "Resolved page %s for %s %s: %s",
            page, device.platform, device.platform_version,
            " -> ".join(chain_names(chain)) or "<no units>",
        )
        return PageResolution(
            page=page,
            device=device,
            units=tuple(units),
            resolved_versions=MappingProxyType(resolved_versions),
            chain=chain,
            locator_map=locator_map,
        )

    def _resolve_versions(
        self,
        page: str,
        device: DeviceDescriptor,
        dimension_values: Mapping[Dimension, str],
        units: List[UnitIdentifier],
    ) -> Dict[Dimension, ResolvedVersion]:
        resolved: Dict[Dimension, ResolvedVersion] = {}
        for dimension, tag in dimension_values.items():
            if not dimension.is_gated:
                continue
            requested = device.version_for(dimension)
            available = [unit.version for unit in units if unit.dimension is dimension]
            version = self.version_resolver.resolve(dimension, requested, available)
            result = ResolvedVersion(
                dimension=dimension, tag=tag, requested=requested, version=version,
            )
            if result.was_adjusted:
                self._publish(VersionAdjusted(
                    page=page,
                    dimension=dimension.value,
                    requested=str(requested),
                    resolved=str(version),
                ))
            resolved[dimension] = result
        return resolved

    def _default_loader(self, tag: str) -> Optional[Mapping[str, Any]]:
        if self.layers is None:
            return None
        return self.layers.load_layer_document(tag)

    def _publish(self, event: object) -> None:
        if self.event_publisher is not None:
            self.event_publisher.publish(event)
