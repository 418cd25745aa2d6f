"""Devices: the entry point test code drives pages through.

A Device holds its descriptor, an opaque driver backend and the app's
secret stores. Attributes the device does not define are looked up on
its current page, so ``device.sign_in(user)`` calls the current page's
``sign_in`` capability.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from devium.components.secrets import SecretStore
from devium.domains.page_resolution import DeviceDescriptor

if TYPE_CHECKING:
    from devium.components.page import Page, PageBuilder

logger = logging.getLogger(__name__)


class Device:
    """A device under test with its current page.

    Attributes:
        descriptor: Identity and versions of the device
        driver: The driver backend; never inspected by page resolution
        secrets: Credentials of the app
        permissions: Permission sets of the app
        page: The current page, or None before the first ``open_page``
    """

    def __init__(
        self,
        descriptor: DeviceDescriptor,
        builder: "PageBuilder",
        driver: Any = None,
        secrets: Optional[SecretStore] = None,
        permissions: Optional[SecretStore] = None,
    ) -> None:
        self.descriptor = descriptor
        self.builder = builder
        self.driver = driver
        self.secrets = secrets or SecretStore()
        self.permissions = permissions or SecretStore()
        self.page: Optional["Page"] = None

    @property
    def app(self) -> str:
        return self.descriptor.app

    @property
    def platform(self) -> str:
        return self.descriptor.platform

    @property
    def tv_app(self) -> Optional[str]:
        return self.descriptor.tv

    def has_page(self, page_name: str) -> bool:
        return self.builder.has_page(page_name)

    def open_page(self, page_name: str) -> "Page":
        """Build ``page_name`` and make it the current page.

        Raises:
            PageResolutionError: If the page cannot be resolved; the
                current page is left unchanged
        """
        page = self.builder.build(page_name, self)
        self.page = page
        logger.debug("Device %s now on page %s", self.app, page_name)
        return page

    def get_secret(self, handle: str, random: bool = False, **match: Any) -> Any:
        return self.secrets.get(handle, random=random, **match)

    def get_permissions(self, handle: str, random: bool = False, **match: Any) -> Any:
        return self.permissions.get(handle, random=random, **match)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        page = self.__dict__.get("page")
        if page is None:
            raise AttributeError(
                f"Device has no attribute '{name}' and no page is open"
            )
        return getattr(page, name)

    def __repr__(self) -> str:
        current = self.page.name if self.page is not None else None
        return (
            f"Device(app={self.app!r}, platform={self.platform!r}, "
            f"platform_version={self.descriptor.platform_version!r}, page={current!r})"
        )
