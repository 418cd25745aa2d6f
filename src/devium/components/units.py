"""Behavior units and the catalog that maps declarations to implementations.

A page declares units by name (``Android_10``); the catalog maps each
``(app, page, unit name)`` triple to the class implementing that unit's
behavior. Apps sharing page and unit names keep separate behavior. Units
that only contribute locators need no implementation.

Usage:

    from devium.components.units import BehaviorUnit, default_catalog

    @default_catalog.unit("Shop", "Login", "Android_10")
    class LoginAndroid10(BehaviorUnit):
        def sign_in(self, user):
            self.driver.type(self.locator("login.username"), user)
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, Tuple, Type

from devium.domains.page_resolution import UnitIdentifier

if TYPE_CHECKING:
    from devium.components.page import Page

logger = logging.getLogger(__name__)


class BehaviorUnit:
    """Base class for the behavior a unit adds to a page.

    Public methods of a subclass become callable on the page. When several
    units of a chain define the same method, the unit latest in the chain
    wins.
    """

    def __init__(self, page: "Page") -> None:
        self.page = page

    @property
    def device(self) -> Any:
        return self.page.device

    @property
    def driver(self) -> Any:
        """The opaque driver backend of the device."""
        return self.page.device.driver

    def locator(self, path: str) -> Any:
        return self.page.locator(path)


BASE_ATTRIBUTES = frozenset(dir(BehaviorUnit)) | {"page"}


class UnitCatalog:
    """Explicit registry of behavior implementations per app, page and unit.

    Concurrency:
        Registration normally happens at import time; it is guarded by a
        lock so plugins may register while pages are being built.
    """

    def __init__(self) -> None:
        self._implementations: Dict[Tuple[str, str, str], Type[BehaviorUnit]] = {}
        self._lock = threading.Lock()

    def register(
        self,
        app: str,
        page: str,
        unit_name: str,
        implementation: Type[BehaviorUnit],
    ) -> None:
        """Register or override the implementation of a unit.

        Raises:
            MalformedUnitIdentifier: If ``unit_name`` is not a unit name
            TypeError: If ``implementation`` is not a BehaviorUnit subclass
        """
        UnitIdentifier.parse(unit_name)
        if not (isinstance(implementation, type) and issubclass(implementation, BehaviorUnit)):
            raise TypeError(
                f"Implementation of {app}/{page}/{unit_name} must subclass BehaviorUnit"
            )
        with self._lock:
            self._implementations[(app, page, unit_name)] = implementation

    def unit(
        self, app: str, page: str, unit_name: str
    ) -> Callable[[Type[BehaviorUnit]], Type[BehaviorUnit]]:
        """Class decorator form of ``register``."""
        def decorator(implementation: Type[BehaviorUnit]) -> Type[BehaviorUnit]:
            self.register(app, page, unit_name, implementation)
            return implementation
        return decorator

    def get(self, app: str, page: str, unit_name: str) -> Optional[Type[BehaviorUnit]]:
        return self._implementations.get((app, page, unit_name))

    def implementations(
        self, app: str, page: str, chain: Sequence[UnitIdentifier]
    ) -> List[Type[BehaviorUnit]]:
        """Implementations for a chain, in chain order, skipping layer-only units."""
        found = []
        for unit in chain:
            implementation = self.get(app, page, unit.name)
            if implementation is None:
                logger.debug("Unit %s of %s page %s has no behavior", unit.name, app, page)
                continue
            found.append(implementation)
        return found

    def clear(self) -> None:
        with self._lock:
            self._implementations.clear()


default_catalog = UnitCatalog()
