"""Tests for version module."""

from __future__ import annotations

from unittest.mock import patch

import txxt
from txxt._version import __version__, get_full_version_string, get_git_sha, get_version


class TestVersionModule:
    """Tests for version module functions."""

    def test_version_is_string(self) -> None:
        """__version__ should be a string."""
        assert isinstance(__version__, str)

    def test_version_format(self) -> None:
        """Version should follow semver pattern."""
        parts = __version__.split(".")
        assert len(parts) >= 2
        assert all(p.isdigit() for p in parts[:2])

    def test_get_version_returns_version(self) -> None:
        """get_version should return the version string."""
        assert get_version() == __version__

    def test_package_exports_version(self) -> None:
        assert txxt.__version__ == __version__


class TestFullVersionString:
    """Tests for get_full_version_string."""

    def test_with_sha(self) -> None:
        with patch("txxt._version.get_git_sha", return_value="abc1234"):
            assert get_full_version_string() == f"txxt {__version__} (abc1234)"

    def test_without_sha(self) -> None:
        with patch("txxt._version.get_git_sha", return_value=None):
            assert get_full_version_string() == f"txxt {__version__}"

    def test_git_sha_is_cached(self) -> None:
        assert get_git_sha() == get_git_sha()
        assert get_git_sha.cache_info().hits >= 1
