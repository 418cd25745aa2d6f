"""Ordered unit chain selection.

The chain is the order-preserving subsequence of a page's validated unit
list that a device composes. Selection works on a range:

    [ base units ... min_bound ] ( gated middle span ) [ max_bound ]

``min_bound`` and ``max_bound`` are the first and last units pinned by a
resolved version. Everything up to and including ``min_bound`` is taken.
Units strictly between the bounds are taken only when the device's
resolved version for their dimension reaches the unit's version.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Set, Tuple

from .value_objects import Dimension, ResolvedVersion, UnitIdentifier
from .version_resolver import compare_versions

logger = logging.getLogger(__name__)

Chain = Tuple[UnitIdentifier, ...]


@dataclass
class ChainBuilder:
    """Builds the composition chain for one device and page."""

    def build(
        self,
        units: Sequence[UnitIdentifier],
        resolved_versions: Mapping[Dimension, ResolvedVersion],
    ) -> Chain:
        """Select the units to compose, in declaration order.

        Args:
            units: The filtered and validated unit list of the page
            resolved_versions: Resolved versions of the gated dimensions

        Returns:
            The chain; empty when no unit is pinned by a resolved version
        """
        if not units:
            return ()

        pins = self._pinned(units, resolved_versions)
        min_index = self._find_min(units, pins)
        if min_index is None:
            logger.debug("No pinned unit among %d units, chain is empty", len(units))
            return ()

        chain: List[UnitIdentifier] = list(units[: min_index + 1])
        max_index = self._find_max(units, pins)
        if max_index is None or max_index == min_index:
            return tuple(chain)

        for unit in units[min_index + 1: max_index]:
            if self._supported(unit, resolved_versions):
                chain.append(unit)
        chain.append(units[max_index])
        return tuple(chain)

    @staticmethod
    def _pinned(
        units: Sequence[UnitIdentifier],
        resolved_versions: Mapping[Dimension, ResolvedVersion],
    ) -> Set[Tuple[str, str]]:
        declared = {unit.dimension for unit in units}
        pins: Set[Tuple[str, str]] = set()
        for dimension, resolved in resolved_versions.items():
            # Only dimensions with declarations carry a parseable resolved version
            if not dimension.is_gated or dimension not in declared:
                continue
            pinned = resolved.pinned_unit
            if pinned is not None:
                pins.add((pinned.tag, pinned.suffix))
        return pins

    @staticmethod
    def _find_min(
        units: Sequence[UnitIdentifier], pins: Set[Tuple[str, str]]
    ) -> Optional[int]:
        for index, unit in enumerate(units):
            if (unit.tag, unit.suffix) in pins:
                return index
        return None

    @staticmethod
    def _find_max(
        units: Sequence[UnitIdentifier], pins: Set[Tuple[str, str]]
    ) -> Optional[int]:
        if len(units) == 1:
            return None
        for index in range(len(units) - 1, -1, -1):
            if (units[index].tag, units[index].suffix) in pins:
                return index
        return None

    @staticmethod
    def _supported(
        unit: UnitIdentifier,
        resolved_versions: Mapping[Dimension, ResolvedVersion],
    ) -> bool:
        # application_name units have no resolved version and never pass
        if unit.dimension is None or not unit.dimension.is_gated:
            return False
        resolved = resolved_versions.get(unit.dimension)
        if resolved is None or resolved.version is None:
            return False
        return compare_versions(unit.version, resolved.version) <= 0


def chain_names(chain: Sequence[UnitIdentifier]) -> List[str]:
    """Declared names of the units in a chain."""
    return [unit.name for unit in chain]
