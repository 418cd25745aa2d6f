"""Page Resolution Value Objects.

Immutable types that carry no identity. Equality is structural.

The resolution errors live here as well so that every layer (domain
services, adapters, the RF library and the MCP tools) can import them
without pulling in the services.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple


class Dimension(str, Enum):
    """One axis of device identity that can gate behavior units.

    The declaration order of the members is the lookup order used when a
    unit tag matches more than one dimension value of a device.
    """
    APP = "app"
    VENDOR = "vendor"
    PLATFORM = "platform"
    APPLICATION_NAME = "application_name"
    TV = "tv"

    @property
    def is_gated(self) -> bool:
        """True if units of this dimension are selected by version.

        Units tagged with the application-name token only take part in
        hierarchy validation.
        """
        return self is not Dimension.APPLICATION_NAME


# =============================================================================
# Errors
# =============================================================================


class PageResolutionError(RuntimeError):
    """Base class for every failure raised while resolving a page."""


class ImproperHierarchy(PageResolutionError):
    """Units of one dimension are not declared in non-decreasing version order.

    Attributes:
        dimension: The dimension whose declarations are out of order
        unit: The offending unit name
        previous: The earlier unit of the same dimension with a higher version
    """

    def __init__(self, dimension: Dimension, unit: str, previous: str) -> None:
        self.dimension = dimension
        self.unit = unit
        self.previous = previous
        super().__init__(
            f"Improper module hierarchy: '{unit}' is declared after "
            f"'{previous}' but has a lower {dimension.value} version"
        )


class NoApplicableVersion(PageResolutionError):
    """A dimension declares units but none at or below the device version."""

    def __init__(
        self,
        dimension: Dimension,
        requested: Optional[str],
        available: List[str],
    ) -> None:
        self.dimension = dimension
        self.requested = requested
        self.available = list(available)
        super().__init__(
            f"No {dimension.value} version at or below "
            f"'{requested}' is supported (available: {', '.join(self.available)})"
        )


class UnknownUnit(PageResolutionError):
    """A page or navigation target does not exist in the registry."""

    def __init__(self, name: str, page: Optional[str] = None) -> None:
        self.name = name
        self.page = page
        if page:
            message = f"{name} not found (requested from page '{page}')"
        else:
            message = f"{name} not found"
        super().__init__(message)


class MalformedUnitIdentifier(PageResolutionError, ValueError):
    """A unit name does not follow the ``<tag>_<major>[_<minor>...]`` form."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Malformed unit identifier '{name}': {reason}")


# =============================================================================
# Versions
# =============================================================================


_SEGMENT = re.compile(r"^\d+$")


def version_segments(version: str) -> Tuple[str, ...]:
    """Split a dotted version string into its digit segments.

    Raises:
        ValueError: If the version is empty or a segment is not numeric
    """
    parts = tuple(part.strip() for part in str(version).split("."))
    if not parts or not all(_SEGMENT.match(part) for part in parts):
        raise ValueError(f"Invalid version string: '{version}'")
    return parts


# =============================================================================
# Units
# =============================================================================


@dataclass(frozen=True)
class UnitIdentifier:
    """A version-tagged unit name such as ``Android_12_1``.

    Attributes:
        name: The declared symbol, unchanged
        tag: The dimension tag (``Android``)
        suffix: The version suffix as declared (``12_1``)
        dimension: The device dimension the tag was matched to, if any

    Examples:
        >>> unit = UnitIdentifier.parse("platform_12_1")
        >>> unit.version
        '12.1'
    """
    name: str
    tag: str
    suffix: str
    dimension: Optional[Dimension] = field(default=None, compare=False)

    SEPARATOR: ClassVar[str] = "_"

    @classmethod
    def parse(
        cls, name: str, dimension: Optional[Dimension] = None
    ) -> "UnitIdentifier":
        """Parse a declared unit name.

        Raises:
            MalformedUnitIdentifier: If the tag or version suffix is invalid
        """
        tag = cls.tag_of(name)
        if not tag:
            raise MalformedUnitIdentifier(name, "missing dimension tag")
        suffix = name[len(tag) + 1:]
        segments = [segment.strip() for segment in suffix.split(cls.SEPARATOR)]
        if not suffix or not all(_SEGMENT.match(s) for s in segments):
            raise MalformedUnitIdentifier(
                name, "version suffix must be numeric segments joined by '_'"
            )
        return cls(
            name=name,
            tag=tag,
            suffix=cls.SEPARATOR.join(segments),
            dimension=dimension,
        )

    @classmethod
    def for_version(cls, tag: str, version: str) -> "UnitIdentifier":
        """Build the identifier a device would pin for ``tag`` at ``version``."""
        suffix = cls.SEPARATOR.join(version_segments(version))
        return cls(name=f"{tag}{cls.SEPARATOR}{suffix}", tag=tag, suffix=suffix)

    @staticmethod
    def tag_of(name: str) -> str:
        """Return the dimension tag of a unit name (text before the first ``_``)."""
        return name.split(UnitIdentifier.SEPARATOR, 1)[0].strip()

    @property
    def version(self) -> str:
        """The dotted version this unit applies from."""
        return ".".join(self.suffix.split(self.SEPARATOR))

    def __str__(self) -> str:
        return self.name


# =============================================================================
# Device
# =============================================================================


@dataclass(frozen=True)
class DeviceDescriptor:
    """Identity and versions of the device a page is resolved for.

    The vendor dimension only exists when the device carries a vendor skin
    distinct from its platform. The tv and application-name dimensions are
    versioned by the platform version.

    Attributes:
        app: Application name, matching the app folder (``Shop``)
        platform: OS platform name (``Android``)
        platform_version: OS version (``12.1``)
        app_version: Application version
        vendor: OEM skin name (``Samsung``)
        vendor_version: OEM skin version
        application_name: Display name; its last token is a dimension tag
        tv: TV variant tag (``TV``) or None outside TV contexts
    """
    app: str
    platform: str
    platform_version: str
    app_version: Optional[str] = None
    vendor: Optional[str] = None
    vendor_version: Optional[str] = None
    application_name: str = ""
    tv: Optional[str] = None

    DEFAULT_TV_MARKERS: ClassVar[Tuple[str, ...]] = (
        "mibox", "bravia", "afft", "aquos", "shield", "aftmm", "sony",
    )

    def __post_init__(self) -> None:
        if not self.app:
            raise ValueError("DeviceDescriptor.app must not be empty")
        if not self.platform:
            raise ValueError("DeviceDescriptor.platform must not be empty")
        if not self.platform_version:
            raise ValueError("DeviceDescriptor.platform_version must not be empty")

    @classmethod
    def from_device_info(
        cls,
        info: Mapping[str, Any],
        tv_markers: Optional[Tuple[str, ...]] = None,
    ) -> "DeviceDescriptor":
        """Create a descriptor from a device-info mapping.

        Accepts the keys used by device capability files: ``app``,
        ``version`` (or ``app_version``), ``platform``, ``platform_version``,
        ``vendor``, ``vendor_version`` and ``applicationName`` (or
        ``application_name``). The platform name is capitalized and the
        tv variant is detected from the application name.
        """
        application_name = str(
            info.get("applicationName") or info.get("application_name") or ""
        )
        platform = str(info.get("platform") or "").capitalize()
        app_version = info.get("app_version", info.get("version"))
        vendor_version = info.get("vendor_version")
        return cls(
            app=str(info.get("app") or ""),
            platform=platform,
            platform_version=_as_version(info.get("platform_version")),
            app_version=_as_version(app_version) if app_version is not None else None,
            vendor=info.get("vendor") or None,
            vendor_version=(
                _as_version(vendor_version) if vendor_version is not None else None
            ),
            application_name=application_name,
            tv=cls.detect_tv(application_name, tv_markers),
        )

    @classmethod
    def detect_tv(
        cls, application_name: str, markers: Optional[Tuple[str, ...]] = None
    ) -> Optional[str]:
        """Return ``"TV"`` when the application name names a TV device."""
        lowered = application_name.lower()
        if any(marker in lowered for marker in (markers or cls.DEFAULT_TV_MARKERS)):
            return "TV"
        return None

    @property
    def application_token(self) -> Optional[str]:
        """Last whitespace-delimited token of the application display name."""
        tokens = self.application_name.split()
        return tokens[-1] if tokens else None

    @property
    def has_vendor_skin(self) -> bool:
        return bool(self.vendor) and self.vendor.lower() != self.platform.lower()

    def dimension_values(self) -> Dict[Dimension, str]:
        """Tag of every dimension present on this device, in lookup order."""
        candidates = (
            (Dimension.APP, self.app),
            (Dimension.VENDOR, self.vendor if self.has_vendor_skin else None),
            (Dimension.PLATFORM, self.platform),
            (Dimension.APPLICATION_NAME, self.application_token),
            (Dimension.TV, self.tv),
        )
        return {dimension: tag for dimension, tag in candidates if tag}

    def version_for(self, dimension: Dimension) -> Optional[str]:
        """The device's own version for a dimension."""
        if dimension is Dimension.APP:
            return self.app_version
        if dimension is Dimension.VENDOR:
            return self.vendor_version
        return self.platform_version


def _as_version(value: Any) -> str:
    # capability files often carry versions as YAML floats or ints
    return "" if value is None else str(value)


# =============================================================================
# Resolution results
# =============================================================================


@dataclass(frozen=True)
class ResolvedVersion:
    """Version actually used to select units for one dimension.

    Attributes:
        dimension: The dimension
        tag: The device's tag for the dimension
        requested: The device's own version
        version: The selected version
    """
    dimension: Dimension
    tag: str
    requested: Optional[str]
    version: Optional[str]

    @property
    def was_adjusted(self) -> bool:
        """True if the version was lowered to the nearest supported one."""
        return self.version != self.requested

    @property
    def pinned_unit(self) -> Optional[UnitIdentifier]:
        """The identifier this dimension pins in a unit list."""
        if self.version is None:
            return None
        return UnitIdentifier.for_version(self.tag, self.version)
