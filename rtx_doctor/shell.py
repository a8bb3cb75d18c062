"""Shell detection and version probing."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable, Mapping
from enum import Enum

from pydantic import BaseModel

from rtx_doctor.env import RTX_SHELL
from rtx_doctor.errors import ShellProbeError
from rtx_doctor.lookup import Lookup

logger = logging.getLogger(__name__)

PROBE_TIMEOUT: float = 5.0


class ShellType(str, Enum):
    BASH = "bash"
    FISH = "fish"
    XONSH = "xonsh"
    ZSH = "zsh"

    def __str__(self) -> str:
        return self.value


def detect_shell(env: Mapping[str, str]) -> ShellType | None:
    """Identify the calling shell from ``RTX_SHELL`` or ``SHELL``."""
    raw = env.get(RTX_SHELL) or env.get("SHELL") or ""
    name = os.path.basename(raw.strip()).lower()
    for shell in ShellType:
        if name == shell.value:
            return shell
    return None


def _run_version(command: str) -> str:
    try:
        result = subprocess.run(
            [command, "--version"],
            capture_output=True, text=True, timeout=PROBE_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        raise ShellProbeError(str(exc), details={"command": command}) from exc
    if result.returncode != 0:
        raise ShellProbeError(
            f"{command} --version exited with status {result.returncode}",
            details={"stderr": result.stderr.strip()},
        )
    return result.stdout.strip()


def shell_command(shell: ShellType, env: Mapping[str, str]) -> str:
    """Prefer the full ``SHELL`` path when it points at the detected shell."""
    configured = env.get("SHELL", "")
    if configured and configured.endswith(shell.value):
        return configured
    return shell.value


def query_version(command: str, runner: Callable[[str], str] = _run_version) -> Lookup[str]:
    try:
        return Lookup.found(runner(command))
    except ShellProbeError as exc:
        logger.debug("shell version probe failed for %s: %s", command, exc.message)
        return Lookup.unavailable(f"failed to get shell version: {exc.message}")


class ShellInfo(BaseModel):
    """What the report knows about the calling shell.

    ``name`` is None when detection failed. Otherwise exactly one of
    ``version`` and ``probe_error`` is set.
    """

    name: str | None = None
    command: str | None = None
    version: str | None = None
    probe_error: str | None = None


def probe_shell(
    env: Mapping[str, str],
    detector: Callable[[Mapping[str, str]], ShellType | None] = detect_shell,
    runner: Callable[[str], str] = _run_version,
) -> ShellInfo:
    shell = detector(env)
    if shell is None:
        return ShellInfo()
    command = shell_command(shell, env)
    version = query_version(command, runner)
    if version.ok:
        return ShellInfo(name=shell.value, command=command, version=version.value)
    return ShellInfo(name=shell.value, command=command, probe_error=version.reason)
