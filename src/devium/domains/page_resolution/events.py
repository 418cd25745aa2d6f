"""Page Resolution Domain Events.

Events emitted while a page is resolved, for diagnostics and logging.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple


@dataclass(frozen=True)
class UnitsFiltered:
    """Emitted after a page's declarations are filtered for a device.

    Consumers:
    - Diagnostics (why a declared unit was not applied)
    """
    page: str
    declared: int
    kept: Tuple[str, ...]
    dropped: Tuple[str, ...]
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class VersionAdjusted:
    """Emitted when a device version is lowered to a supported version."""
    page: str
    dimension: str
    requested: str
    resolved: str
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class ChainBuilt:
    """Emitted when the composition chain of a page is selected."""
    page: str
    chain: Tuple[str, ...]
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class LocatorMapMerged:
    """Emitted when the effective locator map of a page is merged."""
    page: str
    units: int
    keys: Tuple[str, ...]
    timestamp: datetime = field(default_factory=datetime.now)
