"""Environment snapshot and well-known rtx locations.

The process environment is copied once when the doctor starts. Every
collaborator reads from that copy, so later changes to ``os.environ`` do not
leak into a running report.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from pathlib import Path

RTX_PREFIX: str = "RTX_"
"""Reserved namespace for rtx's own variables."""

RTX_SHELL: str = "RTX_SHELL"
RTX_DATA_DIR: str = "RTX_DATA_DIR"
RTX_CONFIG_DIR: str = "RTX_CONFIG_DIR"
RTX_CACHE_DIR: str = "RTX_CACHE_DIR"
RTX_DEFAULT_TOOL_VERSIONS_FILENAME: str = "RTX_DEFAULT_TOOL_VERSIONS_FILENAME"
RTX_DEFAULT_CONFIG_FILENAME: str = "RTX_DEFAULT_CONFIG_FILENAME"
RTX_HIDE_UPDATE_WARNING: str = "RTX_HIDE_UPDATE_WARNING"
RTX_VERSION_URL: str = "RTX_VERSION_URL"

ACTIVATION_MARKER: str = "__RTX_DIFF"
"""Exported by the shell hook installed with ``rtx activate``."""

_TRUTHY = {"1", "true", "yes", "on"}


def parse_bool(value: str) -> bool | None:
    """Parse ``true/1/yes/on`` and ``false/0/no/off``; anything else is None."""
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return None


class EnvSnapshot(Mapping[str, str]):
    """Read-only copy of the environment taken at engine start."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values or {})

    @classmethod
    def capture(cls) -> EnvSnapshot:
        return cls(os.environ)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def rtx_vars(self) -> list[tuple[str, str]]:
        """Return ``RTX_*`` pairs in the snapshot's own order."""
        return [(k, v) for k, v in self._values.items() if k.startswith(RTX_PREFIX)]

    def flag(self, key: str) -> bool:
        return parse_bool(self.get(key, "")) is True

    @property
    def home(self) -> Path:
        return Path(self.get("HOME") or Path.home())

    def _xdg(self, override: str, xdg_key: str, fallback: str) -> Path:
        if self.get(override):
            return Path(self[override])
        base = self.get(xdg_key)
        root = Path(base) if base else self.home / fallback
        return root / "rtx"

    @property
    def data_dir(self) -> Path:
        return self._xdg(RTX_DATA_DIR, "XDG_DATA_HOME", ".local/share")

    @property
    def config_dir(self) -> Path:
        return self._xdg(RTX_CONFIG_DIR, "XDG_CONFIG_HOME", ".config")

    @property
    def cache_dir(self) -> Path:
        return self._xdg(RTX_CACHE_DIR, "XDG_CACHE_HOME", ".cache")

    @property
    def plugins_dir(self) -> Path:
        return self.data_dir / "plugins"

    @property
    def installs_dir(self) -> Path:
        return self.data_dir / "installs"

    @property
    def tool_versions_filename(self) -> str:
        return self.get(RTX_DEFAULT_TOOL_VERSIONS_FILENAME) or ".tool-versions"

    @property
    def config_filename(self) -> str:
        return self.get(RTX_DEFAULT_CONFIG_FILENAME) or ".rtx.toml"
