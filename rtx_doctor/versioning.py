"""Version comparison and the "newer release available" check."""

from __future__ import annotations

import http.client
import logging
import re
import time
import urllib.error
import urllib.request
from collections.abc import Callable
from pathlib import Path

from rtx_doctor.env import RTX_HIDE_UPDATE_WARNING, RTX_VERSION_URL, EnvSnapshot
from rtx_doctor.lookup import Lookup

logger = logging.getLogger(__name__)

DEFAULT_VERSION_URL: str = "https://rtx.pub/VERSION"
FETCH_TIMEOUT: float = 3.0
CACHE_TTL_SECONDS: int = 24 * 60 * 60

VERSION_PATTERN = re.compile(r"^v?\d+(\.\d+)*([-+][\w.]+)?$")
_VERSION_SEPARATORS = re.compile(r"[.+-]")


def is_version(text: str) -> bool:
    """Return True for ``1.2.3``, ``v2023.12.0``, ``1.0.0-rc1`` and the like."""
    return VERSION_PATTERN.match(text.strip()) is not None


def _normalize_version_part(part: str) -> tuple[int, str | int]:
    part = part.strip().lower()
    if not part:
        return (0, 0)
    if part.isdigit():
        return (0, int(part))
    return (1, part)


def normalize_version(version: str) -> tuple[tuple[tuple[int, str | int], ...], tuple[tuple[int, str | int], ...]]:
    """Split a version into comparable ``(release, pre_release)`` tuples.

    Build metadata after ``+`` is ignored.
    """

    version = version.strip().lstrip("vV").split("+", 1)[0]
    release, _, pre = version.partition("-")
    release_parts = tuple(_normalize_version_part(p) for p in release.split(".")) if release else ()
    pre_parts = tuple(_normalize_version_part(p) for p in _VERSION_SEPARATORS.split(pre)) if pre else ()
    return release_parts, pre_parts


def _compare_parts(left_parts: tuple, right_parts: tuple) -> int:
    for i in range(max(len(left_parts), len(right_parts))):
        left_part = left_parts[i] if i < len(left_parts) else (0, 0)
        right_part = right_parts[i] if i < len(right_parts) else (0, 0)
        if left_part == right_part:
            continue
        return 1 if left_part > right_part else -1
    return 0


def compare_versions(left: str, right: str) -> int:
    """Compare two version strings; a pre-release sorts below its release.

    Returns:
        -1 if left < right
         0 if equal
         1 if left > right
    """

    left_release, left_pre = normalize_version(left)
    right_release, right_pre = normalize_version(right)
    result = _compare_parts(left_release, right_release)
    if result or left_pre == right_pre:
        return result
    if not left_pre:
        return 1
    if not right_pre:
        return -1
    return _compare_parts(left_pre, right_pre)


def _fetch(url: str) -> str:
    with urllib.request.urlopen(url, timeout=FETCH_TIMEOUT) as response:
        return response.read().decode("utf-8").strip()


class ReleaseChecker:
    """Look up the latest published rtx version, cached for a day."""

    def __init__(
        self,
        env: EnvSnapshot,
        *,
        fetch: Callable[[str], str] = _fetch,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.env = env
        self.url = env.get(RTX_VERSION_URL) or DEFAULT_VERSION_URL
        self.cache_file: Path = env.cache_dir / "latest-version"
        self._fetch = fetch
        self._clock = clock

    def _read_cache(self) -> str | None:
        try:
            age = self._clock() - self.cache_file.stat().st_mtime
            if age > CACHE_TTL_SECONDS:
                return None
            return self.cache_file.read_text(encoding="utf-8").strip() or None
        except OSError:
            return None

    def _write_cache(self, version: str) -> None:
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            self.cache_file.write_text(version + "\n", encoding="utf-8")
        except OSError as exc:
            logger.debug("could not cache latest version: %s", exc)

    def latest_version(self) -> Lookup[str]:
        if self.env.flag(RTX_HIDE_UPDATE_WARNING):
            return Lookup.unavailable(f"{RTX_HIDE_UPDATE_WARNING} is set")

        cached = self._read_cache()
        if cached is not None and is_version(cached):
            return Lookup.found(cached)

        try:
            latest = self._fetch(self.url)
        except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as exc:
            logger.debug("release check against %s failed: %s", self.url, exc)
            return Lookup.unavailable(str(exc))
        if not is_version(latest):
            logger.debug("release check against %s returned no version: %r", self.url, latest[:80])
            return Lookup.unavailable("response is not a version")
        self._write_cache(latest)
        return Lookup.found(latest)


def check_for_new_version(current: str, latest: Lookup[str]) -> str | None:
    """Return the latest version when it is strictly newer than ``current``."""
    if not latest.ok or latest.value is None:
        return None
    if compare_versions(latest.value, current) > 0:
        return latest.value
    return None
