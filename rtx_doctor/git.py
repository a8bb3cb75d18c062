"""Read-only git metadata for plugin checkouts."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from rtx_doctor.errors import GitError
from rtx_doctor.lookup import Lookup

logger = logging.getLogger(__name__)

GIT_TIMEOUT: float = 5.0


class Git:
    """Query a plugin checkout with the ``git`` binary."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _run(self, *args: str) -> str:
        try:
            result = subprocess.run(
                ["git", "-C", str(self.path), *args],
                capture_output=True, text=True, timeout=GIT_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise GitError(f"git {args[0]} failed: {exc}", details={"path": str(self.path)}) from exc
        if result.returncode != 0:
            raise GitError(
                f"git {args[0]} exited with status {result.returncode}",
                details={"path": str(self.path), "stderr": result.stderr.strip()},
            )
        return result.stdout.strip()

    def get_remote_url(self) -> str | None:
        """Return ``remote.origin.url``, or None when there is no usable remote."""
        try:
            url = self._run("config", "--get", "remote.origin.url")
        except GitError as exc:
            logger.debug("no remote for %s: %s", self.path, exc.message)
            return None
        return url or None

    def current_sha_short(self) -> str:
        sha = self._run("rev-parse", "--short", "HEAD")
        if not sha:
            raise GitError("git rev-parse returned no revision", details={"path": str(self.path)})
        return sha

    def lookup_revision(self) -> Lookup[str]:
        try:
            return Lookup.found(self.current_sha_short())
        except GitError as exc:
            logger.debug("revision lookup failed for %s: %s", self.path, exc.message)
            return Lookup.unavailable(exc.message)
