"""Locator map layering.

Each unit of a chain may contribute a layer: the mapping stored under the
unit's version suffix in its dimension's layer document. Layers are deep
merged in chain order into one effective locator map.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from .value_objects import UnitIdentifier

logger = logging.getLogger(__name__)

LayerLoader = Callable[[str], Optional[Mapping[str, Any]]]

EMPTY_LOCATOR_MAP: Mapping[str, Any] = MappingProxyType({})


def deep_merge(base: Mapping[str, Any], incoming: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``incoming`` over ``base`` without mutating either.

    Nested mappings present on both sides are merged recursively; any
    other value from ``incoming`` replaces the one in ``base``.
    """
    merged: Dict[str, Any] = dict(base)
    for key, value in incoming.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def freeze(value: Any) -> Any:
    """Return a read-only deep copy of a parsed document value."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of ``freeze``: plain dicts and lists, e.g. for serialization."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


@dataclass
class ConfigLayerer:
    """Merges the locator layers of a chain into the effective locator map."""

    def merge(
        self,
        chain: Sequence[UnitIdentifier],
        layer_loader: LayerLoader,
    ) -> Mapping[str, Any]:
        """Deep merge every chain unit's layer, later units winning.

        Args:
            chain: The ordered chain
            layer_loader: Returns the layer document for a dimension tag;
                called once per distinct tag

        Returns:
            The effective locator map, deep-frozen
        """
        documents: Dict[str, Optional[Mapping[str, Any]]] = {}
        merged: Dict[str, Any] = {}

        for unit in chain:
            if unit.tag not in documents:
                documents[unit.tag] = layer_loader(unit.tag)
            document = documents[unit.tag]
            if not isinstance(document, Mapping):
                continue
            layer = document.get(unit.suffix)
            if not isinstance(layer, Mapping):
                logger.debug("Unit %s contributes no locator layer", unit.name)
                continue
            merged = deep_merge(merged, layer)

        if not merged:
            return EMPTY_LOCATOR_MAP
        return freeze(merged)
