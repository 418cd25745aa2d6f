"""Tests for version comparison and nearest-supported-version resolution."""

import logging

import pytest

from devium.domains.page_resolution import (
    Dimension,
    NoApplicableVersion,
    VersionResolver,
    compare_versions,
    normalized_keys,
)
from devium.domains.page_resolution.version_resolver import (
    semantic_compare,
    semantic_key,
)


class TestSemanticOrdering:
    __test__ = True

    def test_missing_trailing_segments_are_zero(self):
        assert semantic_key("2", width=3) == (2, 0, 0)
        assert semantic_compare("2", "2.0") == 0

    def test_segments_compare_numerically(self):
        assert semantic_compare("1.10", "1.9") == 1
        assert semantic_compare("9", "10") == -1

    def test_invalid_version_raises(self):
        with pytest.raises(ValueError):
            semantic_compare("1.x", "1.0")


class TestNormalizedKeys:
    __test__ = True

    def test_shorter_versions_padded_with_zero_segments(self):
        assert normalized_keys(["6", "6.1"]) == {"6": 60, "6.1": 61}

    def test_equal_segment_counts_are_not_padded(self):
        assert normalized_keys(["9", "10"]) == {"9": 9, "10": 10}

    def test_empty_input(self):
        assert normalized_keys([]) == {}

    def test_compare_versions(self):
        assert compare_versions("6", "6.1") == -1
        assert compare_versions("2.0", "2") == 0
        assert compare_versions("12.1", "10") == 1


class TestVersionResolver:
    __test__ = True

    def setup_method(self):
        self.resolver = VersionResolver()

    def test_adjusts_down_to_nearest_supported(self):
        assert self.resolver.resolve(Dimension.PLATFORM, "3.0", ["1.0", "2.0"]) == "2.0"

    def test_empty_available_returns_requested(self):
        assert self.resolver.resolve(Dimension.PLATFORM, "3.0", []) == "3.0"

    def test_exact_match_is_kept(self):
        assert self.resolver.resolve(Dimension.VENDOR, "4.0", ["3.0", "4.0", "5.0"]) == "4.0"

    def test_between_versions_picks_lower(self):
        assert self.resolver.resolve(Dimension.PLATFORM, "11", ["9", "10", "12.1"]) == "10"

    def test_picks_highest_of_mixed_segment_counts(self):
        assert self.resolver.resolve(Dimension.PLATFORM, "6.2", ["6", "6.1"]) == "6.1"

    def test_ties_keep_first_declared(self):
        assert self.resolver.resolve(Dimension.APP, "3", ["2", "2.0"]) == "2"

    def test_duplicates_are_ignored(self):
        assert self.resolver.resolve(Dimension.APP, "3", ["1", "1", "2"]) == "2"

    def test_no_qualifying_version_raises(self):
        with pytest.raises(NoApplicableVersion) as exc_info:
            self.resolver.resolve(Dimension.PLATFORM, "8", ["9", "10"])

        error = exc_info.value
        assert error.dimension is Dimension.PLATFORM
        assert error.requested == "8"
        assert error.available == ["9", "10"]
        assert "platform" in str(error)

    def test_missing_requested_with_declared_versions_raises(self):
        with pytest.raises(NoApplicableVersion):
            self.resolver.resolve(Dimension.APP, None, ["1.0"])

    def test_missing_requested_without_declarations_passes_through(self):
        assert self.resolver.resolve(Dimension.APP, None, []) is None

    def test_adjustment_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="devium"):
            self.resolver.resolve(Dimension.PLATFORM, "3.0", ["1.0", "2.0"])

        assert "3.0 -> 2.0" in caplog.text
