"""Version comparison and nearest-supported-version resolution.

Two orderings are used, both over dotted numeric version strings:

- Semantic ordering (``semantic_key``): segments compared numerically left
  to right, missing trailing segments count as zero. It decides which
  declared versions are at or below the device version.
- Normalized-key ordering (``normalized_keys``/``compare_versions``): shorter
  versions are right-padded with zero segments to a common segment count,
  then the segments are concatenated into one integer, so ``"6"`` and
  ``"6.1"`` compare as ``60`` and ``61``. It picks the highest candidate
  and drives hierarchy validation and chain gating.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .value_objects import Dimension, NoApplicableVersion, version_segments

logger = logging.getLogger(__name__)


def semantic_key(version: str, width: int = 0) -> Tuple[int, ...]:
    """Tuple of numeric segments, zero-padded on the right to ``width``."""
    segments = [int(segment) for segment in version_segments(version)]
    segments.extend([0] * (width - len(segments)))
    return tuple(segments)


def semantic_compare(left: str, right: str) -> int:
    """Return -1, 0 or 1 comparing two versions semantically."""
    width = max(len(version_segments(left)), len(version_segments(right)))
    a, b = semantic_key(left, width), semantic_key(right, width)
    return (a > b) - (a < b)


def normalized_keys(versions: Iterable[str]) -> Dict[str, int]:
    """Map each version to its segment-padded concatenated integer key.

    Examples:
        >>> normalized_keys(["6", "6.1"])
        {'6': 60, '6.1': 61}
    """
    segments = {version: version_segments(version) for version in versions}
    width = max((len(s) for s in segments.values()), default=0)
    return {
        version: int("".join(s + ("0",) * (width - len(s))))
        for version, s in segments.items()
    }


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1 comparing two versions by normalized key."""
    keys = normalized_keys([left, right])
    a, b = keys[left], keys[right]
    return (a > b) - (a < b)


@dataclass
class VersionResolver:
    """Adjusts a device version down to the nearest version a page supports.

    Usage:

        resolver = VersionResolver()
        resolver.resolve(Dimension.PLATFORM, "3.0", ["1.0", "2.0"])  # "2.0"
        resolver.resolve(Dimension.PLATFORM, "3.0", [])              # "3.0"
    """

    def resolve(
        self,
        dimension: Dimension,
        requested_version: Optional[str],
        available_versions: Iterable[str],
    ) -> Optional[str]:
        """Resolve the version used for selecting units of ``dimension``.

        Args:
            dimension: The dimension being resolved
            requested_version: The device's own version for the dimension
            available_versions: Versions declared for the dimension on the page

        Returns:
            ``requested_version`` when nothing is declared, otherwise the
            highest declared version that does not exceed it

        Raises:
            NoApplicableVersion: If versions are declared but none is at or
                below the requested version
        """
        available: List[str] = list(dict.fromkeys(available_versions))
        if not available:
            return requested_version

        if not requested_version:
            raise NoApplicableVersion(dimension, requested_version, available)

        qualifying = [
            version for version in available
            if semantic_compare(version, requested_version) <= 0
        ]
        if not qualifying:
            raise NoApplicableVersion(dimension, requested_version, available)

        keys = normalized_keys(qualifying)
        selected = max(qualifying, key=lambda version: keys[version])
        if selected != requested_version:
            logger.debug(
                "Adjusted %s version %s -> %s (supported: %s)",
                dimension.value, requested_version, selected, ", ".join(available),
            )
        return selected
