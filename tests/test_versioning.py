"""Tests for version comparison and the release check."""

from __future__ import annotations

import os
import urllib.error
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from rtx_doctor.env import EnvSnapshot
from rtx_doctor.lookup import Lookup
from rtx_doctor.versioning import (
    CACHE_TTL_SECONDS,
    ReleaseChecker,
    check_for_new_version,
    compare_versions,
    is_version,
)


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        ("1.2.3", "1.2.3", 0),
        ("1.10.0", "1.9.9", 1),
        ("v2.0", "2.0.0", 0),
        ("2023.9.0", "2023.12.1", -1),
        ("1.0.0-rc1", "1.0.0", -1),
        ("1.0.0", "1.0.0-rc1", 1),
        ("1.0.0-rc2", "1.0.0-rc1", 1),
        ("1.0.1-rc1", "1.0.0", 1),
        ("1.0.0+build5", "1.0.0", 0),
    ],
)
def test_compare_versions(left: str, right: str, expected: int) -> None:
    assert compare_versions(left, right) == expected


def test_new_version_only_when_strictly_newer() -> None:
    assert check_for_new_version("1.0.0", Lookup.found("1.0.1")) == "1.0.1"
    assert check_for_new_version("1.0.0", Lookup.found("1.0.0")) is None
    assert check_for_new_version("1.2.0", Lookup.found("1.1.9")) is None
    assert check_for_new_version("1.0.0", Lookup.unavailable("offline")) is None
    assert check_for_new_version("1.0.0", Lookup.found("1.0.0-rc1")) is None


class TestReleaseChecker:

    @pytest.fixture
    def env(self, home: Path) -> EnvSnapshot:
        return EnvSnapshot({"HOME": str(home), "RTX_VERSION_URL": "https://example.invalid/VERSION"})

    def test_fetches_and_caches(self, env):
        fetch = MagicMock(return_value="1.5.0")
        checker = ReleaseChecker(env, fetch=fetch)
        assert checker.latest_version() == Lookup.found("1.5.0")
        fetch.assert_called_once_with("https://example.invalid/VERSION")
        assert checker.cache_file.read_text(encoding="utf-8").strip() == "1.5.0"

        assert checker.latest_version() == Lookup.found("1.5.0")
        assert fetch.call_count == 1

    def test_stale_cache_is_refetched(self, env):
        checker = ReleaseChecker(env, fetch=MagicMock(return_value="2.0.0"))
        checker.cache_file.parent.mkdir(parents=True)
        checker.cache_file.write_text("1.0.0\n", encoding="utf-8")
        old = checker.cache_file.stat().st_mtime - CACHE_TTL_SECONDS - 60
        os.utime(checker.cache_file, (old, old))
        assert checker.latest_version().value == "2.0.0"

    def test_network_failure_is_unavailable(self, env):
        fetch = MagicMock(side_effect=urllib.error.URLError("no route to host"))
        lookup = ReleaseChecker(env, fetch=fetch).latest_version()
        assert not lookup.ok
        assert "no route to host" in lookup.reason

    def test_timeout_is_unavailable(self, env):
        lookup = ReleaseChecker(env, fetch=MagicMock(side_effect=TimeoutError("timed out"))).latest_version()
        assert not lookup.ok

    def test_hidden_by_env(self, home):
        env = EnvSnapshot({"HOME": str(home), "RTX_HIDE_UPDATE_WARNING": "1"})
        fetch = MagicMock()
        assert not ReleaseChecker(env, fetch=fetch).latest_version().ok
        fetch.assert_not_called()

    def test_non_version_response_is_unavailable_and_not_cached(self, env):
        checker = ReleaseChecker(env, fetch=MagicMock(return_value="<!DOCTYPE html><html>login</html>"))
        lookup = checker.latest_version()
        assert not lookup.ok
        assert check_for_new_version("1.0.0", lookup) is None
        assert not checker.cache_file.exists()

    def test_junk_in_cache_is_ignored(self, env):
        checker = ReleaseChecker(env, fetch=MagicMock(return_value="1.2.0"))
        checker.cache_file.parent.mkdir(parents=True)
        checker.cache_file.write_text("<html>\n", encoding="utf-8")
        assert checker.latest_version() == Lookup.found("1.2.0")


@pytest.mark.parametrize("text", ["1.2.3", "v2023.12.0", "1.0.0-rc1", "2.0.0+linux.x64", " 1.0\n"])
def test_is_version(text: str) -> None:
    assert is_version(text)


@pytest.mark.parametrize("text", ["", "latest", "<!DOCTYPE html>", "1.0 beta", "1..2"])
def test_is_not_version(text: str) -> None:
    assert not is_version(text)
