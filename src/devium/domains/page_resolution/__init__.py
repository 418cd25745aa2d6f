"""Page Resolution Bounded Context.

Resolves, for a device descriptor, which version-tagged units of a page
apply, in which order they are composed, and the effective locator map
their layers merge into.
"""
from .value_objects import (
    Dimension, DeviceDescriptor, UnitIdentifier, ResolvedVersion,
    PageResolutionError, ImproperHierarchy, NoApplicableVersion,
    UnknownUnit, MalformedUnitIdentifier,
)
from .version_resolver import VersionResolver, compare_versions, normalized_keys
from .aggregates import UnitRegistry
from .chain_builder import Chain, ChainBuilder
from .config_layerer import ConfigLayerer, deep_merge, freeze, thaw
from .repository import LayerSource, UnitSource
from .services import EventPublisher, PageResolution, PageResolver
from .events import ChainBuilt, LocatorMapMerged, UnitsFiltered, VersionAdjusted

__all__ = [
    "Dimension", "DeviceDescriptor", "UnitIdentifier", "ResolvedVersion",
    "PageResolutionError", "ImproperHierarchy", "NoApplicableVersion",
    "UnknownUnit", "MalformedUnitIdentifier",
    "VersionResolver", "compare_versions", "normalized_keys",
    "UnitRegistry",
    "Chain", "ChainBuilder",
    "ConfigLayerer", "deep_merge", "freeze", "thaw",
    "LayerSource", "UnitSource",
    "EventPublisher", "PageResolution", "PageResolver",
    "ChainBuilt", "LocatorMapMerged", "UnitsFiltered", "VersionAdjusted",
]
