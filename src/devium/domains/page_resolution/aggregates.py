"""Page Resolution Aggregate Root.

The UnitRegistry owns the unit declarations of every page of an app and
enforces the declaration-order invariants when a device filters them.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .repository import UnitSource
from .value_objects import (
    Dimension,
    ImproperHierarchy,
    UnitIdentifier,
    UnknownUnit,
)
from .version_resolver import compare_versions

logger = logging.getLogger(__name__)


@dataclass
class UnitRegistry:
    """Registry of the ordered unit declarations per page.

    Declarations are registered explicitly with ``declare`` or loaded on
    first use from a ``UnitSource``. The declaration order is preserved
    exactly; it defines the unit hierarchy.

    Invariants:
        - A page's declaration is stored as an immutable tuple
        - Within one dimension, a filtered unit list has non-decreasing
          versions in declaration order

    Concurrency:
        Lazy loads from the source are serialized by a lock. Stored
        declarations are never mutated, so readers need no locking.
    """
    source: Optional[UnitSource] = None
    _declarations: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def declare(self, page: str, units: Iterable[str]) -> None:
        """Register or replace the unit declaration of a page.

        Raises:
            ValueError: If the page name is empty
        """
        if not page:
            raise ValueError("Page name must not be empty")
        self._declarations[page] = tuple(str(unit).strip() for unit in units)

    def has_page(self, page: str) -> bool:
        """Check if a page is declared, consulting the source if needed."""
        return self._lookup(page) is not None

    def pages(self) -> List[str]:
        """All declared page names (explicit and source-provided)."""
        names = list(self._declarations)
        if self.source is not None:
            names.extend(p for p in self.source.list_pages() if p not in names)
        return names

    def load_units(self, page: str) -> Tuple[str, ...]:
        """Return every unit declared for ``page`` in declaration order.

        Raises:
            UnknownUnit: If the page has no declaration
        """
        units = self._lookup(page)
        if units is None:
            raise UnknownUnit(page)
        return units

    def filter_valid(
        self,
        units: Iterable[str],
        dimension_values: Mapping[Dimension, str],
    ) -> List[UnitIdentifier]:
        """Drop units that do not belong to the device and validate the rest.

        A unit belongs to the device when its tag equals one of the device's
        dimension tags; the first matching dimension in ``dimension_values``
        order wins.

        Args:
            units: Declared unit names in declaration order
            dimension_values: The device's tag per dimension

        Returns:
            The parsed units that apply, in declaration order

        Raises:
            MalformedUnitIdentifier: If a matching unit has a bad suffix
            ImproperHierarchy: If a dimension's versions decrease
        """
        by_tag: Dict[str, Dimension] = {}
        for dimension, tag in dimension_values.items():
            by_tag.setdefault(tag, dimension)

        filtered: List[UnitIdentifier] = []
        for name in units:
            dimension = by_tag.get(UnitIdentifier.tag_of(name))
            if dimension is None:
                continue
            filtered.append(UnitIdentifier.parse(name, dimension))

        self.validate_hierarchy(filtered)
        return filtered

    @staticmethod
    def validate_hierarchy(units: Iterable[UnitIdentifier]) -> None:
        """Check that every dimension's units are declared oldest first.

        Raises:
            ImproperHierarchy: On the first unit with a lower version than
                the previous unit of its dimension
        """
        previous: Dict[Dimension, UnitIdentifier] = {}
        for unit in units:
            if unit.dimension is None:
                continue
            prior = previous.get(unit.dimension)
            if prior is not None and compare_versions(unit.version, prior.version) < 0:
                raise ImproperHierarchy(unit.dimension, unit.name, prior.name)
            previous[unit.dimension] = unit

    def _lookup(self, page: str) -> Optional[Tuple[str, ...]]:
        units = self._declarations.get(page)
        if units is not None or self.source is None:
            return units
        with self._lock:
            if page in self._declarations:
                return self._declarations[page]
            declared = self.source.enumerate_units(page)
            if declared is None:
                return None
            logger.debug("Loaded %d unit declarations for page %s", len(declared), page)
            self.declare(page, declared)
            return self._declarations[page]
