"""Installed plugin registry."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PluginRecord:
    """A registered plugin. ``name`` is unique within a registry."""

    name: str
    install_path: Path
    installed: bool


class PluginRegistry:
    """Plugins in registry order: installed ones by name, then missing ones."""

    def __init__(self, plugins: Iterable[PluginRecord] = ()) -> None:
        self._plugins: dict[str, PluginRecord] = {}
        for plugin in plugins:
            self._plugins.setdefault(plugin.name, plugin)

    @classmethod
    def load(cls, plugins_dir: Path, referenced: Iterable[str] = ()) -> PluginRegistry:
        """Scan ``plugins_dir`` and add every referenced plugin that is not on disk."""
        records: list[PluginRecord] = []
        if plugins_dir.is_dir():
            for entry in sorted(plugins_dir.iterdir(), key=lambda p: p.name):
                if entry.is_dir() and not entry.name.startswith("."):
                    records.append(PluginRecord(name=entry.name, install_path=entry, installed=True))
        on_disk = {r.name for r in records}
        for name in referenced:
            if name not in on_disk:
                logger.debug("plugin %s is referenced but not installed", name)
                records.append(PluginRecord(name=name, install_path=plugins_dir / name, installed=False))
        return cls(records)

    def __iter__(self) -> Iterator[PluginRecord]:
        return iter(self._plugins.values())

    def __len__(self) -> int:
        return len(self._plugins)

    def __contains__(self, name: object) -> bool:
        return name in self._plugins
