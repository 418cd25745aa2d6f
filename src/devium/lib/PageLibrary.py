"""PageLibrary - version-aware app pages for Robot Framework.

Resolves which version-tagged units of a page apply to the device under
test and exposes the page's effective locator map to test data:
- Open Device: Describe the device under test
- Open Page: Resolve and compose a page for the device
- Get Page Chain: Units the current page is composed of
- Get Locator Map / Get Locator: Effective locators of the current page
- Go To Page: Navigate through the current page's handler
- Get Secret / Get Permissions: App credentials
"""

import logging
from typing import Any, Dict, List, Optional

from robot.api import logger as rf_logger
from robot.api.deco import keyword, library

from devium.components.device import Device
from devium.container import ServiceContainer, get_container
from devium.domains.page_resolution import thaw
from devium.models.config_models import DeviumConfig

logger = logging.getLogger(__name__)


@library(scope="GLOBAL", version="1.0.0", doc_format="ROBOT")
class PageLibrary:
    """Version-aware page composition for app tests.

    Pages declare an ordered list of units per app in
    ``<apps_root>/<App>/pages.yaml``. For the device under test the
    library selects the units that apply to its platform, vendor skin,
    app and TV variant versions, and merges their locator layers from
    ``<apps_root>/<App>/ui_map/<tag>.yaml``.

    = Configuration =

    | *** Settings ***
    | Library    devium.lib.PageLibrary    apps_root=${CURDIR}/apps

    = Examples =

    | *** Test Cases ***
    | Login Page Uses Android 12 Locators
    |     Open Device    app=Shop    platform=android    platform_version=12.1
    |     Open Page    Login
    |     ${chain}=    Get Page Chain
    |     ${user}=    Get Locator    login.username
    """

    ROBOT_LIBRARY_SCOPE = "GLOBAL"
    ROBOT_LIBRARY_VERSION = "1.0.0"

    def __init__(
        self,
        apps_root: str = None,
        log_level: str = None,
        container: Optional[ServiceContainer] = None,
    ):
        """Initialize PageLibrary.

        Args:
            apps_root: Directory holding one folder per app (default from
                ``DEVIUM_APPS_ROOT`` or ``apps``)
            log_level: Logging verbosity of the devium loggers
            container: Pre-configured service container (mainly for tests)
        """
        if container is None:
            config = DeviumConfig.from_env()
            if apps_root:
                config.update(APPS_ROOT=apps_root)
            container = ServiceContainer(config=config) if apps_root else get_container()
        self._container = container
        self._device: Optional[Device] = None

        level = (log_level or self._container.config.LOG_LEVEL).upper()
        logging.getLogger("devium").setLevel(getattr(logging, level, logging.INFO))

        rf_logger.info(
            f"PageLibrary initialized with apps root: {self._container.config.APPS_ROOT}"
        )

    @property
    def device(self) -> Device:
        if self._device is None:
            raise RuntimeError("No device is open. Use 'Open Device' first.")
        return self._device

    # ==========================================================================
    # Device and page keywords
    # ==========================================================================

    @keyword("Open Device")
    def open_device(self, app: str, platform: str, platform_version: str, **details) -> None:
        """Describe the device under test.

        | =Arguments= | =Description= |
        | app | App folder name under the apps root |
        | platform | OS platform (capitalized automatically) |
        | platform_version | OS version, e.g. ``12.1`` |
        | details | ``version``, ``vendor``, ``vendor_version``, ``applicationName`` |

        = Examples =
        | Open Device | Shop | android | 12.1 |
        | Open Device | Shop | android | 9 | vendor=Samsung | vendor_version=4.0 |
        """
        info: Dict[str, Any] = dict(details)
        info.update(app=app, platform=platform, platform_version=platform_version)
        self._device = self._container.create_device(info)
        rf_logger.info(f"Opened device: {self._device!r}")

    @keyword("Open Page")
    def open_page(self, page: str) -> List[str]:
        """Resolve ``page`` for the open device and make it current.

        Returns the names of the units the page is composed of. Fails when
        the page is unknown, its unit declarations are out of order, or the
        device is older than every declared version of one of its
        dimensions.

        = Examples =
        | ${chain}= | Open Page | Login |
        """
        opened = self.device.open_page(page)
        rf_logger.info(f"Page {page} composed of: {', '.join(opened.mods) or 'no units'}")
        return opened.mods

    @keyword("Go To Page")
    def go_to_page(self, page: str) -> None:
        """Navigate from the current page to ``page`` via its goto handler."""
        self._current_page().goto(page)

    @keyword("Get Page Chain")
    def get_page_chain(self) -> List[str]:
        """Return the unit names of the current page in composition order."""
        return self._current_page().mods

    @keyword("Get Locator Map")
    def get_locator_map(self) -> Dict[str, Any]:
        """Return the effective locator map of the current page."""
        return thaw(self._current_page().ui_map)

    @keyword("Get Locator")
    def get_locator(self, path: str) -> Any:
        """Return the locator at a dotted ``path`` of the current page.

        = Examples =
        | ${field}= | Get Locator | login.username |
        """
        value = self._current_page().locator(path)
        rf_logger.debug(f"Locator {path}: {value}")
        return thaw(value)

    # ==========================================================================
    # Credential keywords
    # ==========================================================================

    @keyword("Get Secret")
    def get_secret(self, handle: str, random: bool = False, **match) -> Any:
        """Return a secret of the app.

        = Examples =
        | ${password}= | Get Secret | subscribers | username=user1 |
        | ${any}= | Get Secret | subscribers | random=True |
        """
        return self.device.get_secret(handle, random=random, **match)

    @keyword("Get Permissions")
    def get_permissions(self, handle: str, random: bool = False, **match) -> Any:
        """Return a permission set of the app."""
        return self.device.get_permissions(handle, random=random, **match)

    def _current_page(self):
        page = self.device.page
        if page is None:
            raise RuntimeError("No page is open. Use 'Open Page' first.")
        return page
