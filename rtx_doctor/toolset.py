"""Resolve the active tool versions from config and environment."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from rtx_doctor.config import Config
from rtx_doctor.env import RTX_PREFIX
from rtx_doctor.errors import Suggestion, ToolsetError

logger = logging.getLogger(__name__)

_ENV_VERSION = re.compile(rf"^{RTX_PREFIX}(?P<plugin>[A-Z0-9_]+)_VERSION$")
_INVALID_VERSION = re.compile(r"[/\\]")


@dataclass(frozen=True)
class ToolVersion:
    plugin: str
    version: str
    source: str
    installed: bool

    def __str__(self) -> str:
        text = f"{self.plugin} {self.version} ({self.source})"
        if not self.installed:
            text += " (missing)"
        return text


@dataclass
class Toolset:
    versions: list[ToolVersion] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.versions:
            return "(none)"
        return "\n".join(str(v) for v in self.versions)


class ToolsetBuilder:
    """Build a :class:`Toolset`; the only doctor step allowed to fail the run."""

    def __init__(self, installs_dir: Path | None = None) -> None:
        self.installs_dir = installs_dir

    def _validate(self, plugin: str, version: str, source: str) -> None:
        if not version or _INVALID_VERSION.search(version):
            raise ToolsetError(
                f"invalid version {version!r} for {plugin} in {source}",
                code="E2001",
                suggestion=Suggestion(
                    action="fix tool version",
                    fix=f"Set a plain version for {plugin}.",
                    example=f"{plugin} latest",
                ),
                details={"plugin": plugin, "source": source},
            )

    def _is_installed(self, installs_dir: Path, plugin: str, version: str) -> bool:
        if version == "system":
            return True
        return (installs_dir / plugin / version).is_dir()

    def build(self, config: Config) -> Toolset:
        installs_dir = self.installs_dir or config.env.installs_dir
        requested: dict[str, tuple[tuple[str, ...], str]] = {}
        for req in config.tool_requests:
            if not req.versions:
                raise ToolsetError(
                    f"no version given for {req.plugin} in {req.source}",
                    code="E2002",
                    details={"plugin": req.plugin, "source": str(req.source)},
                )
            requested[req.plugin] = (req.versions, str(req.source))

        # env overrides win over every config file
        plugin_names = {name.upper().replace("-", "_"): name for name in requested}
        for key, value in config.env.items():
            match = _ENV_VERSION.match(key)
            if match is None:
                continue
            token = match.group("plugin")
            plugin = plugin_names.get(token, token.lower().replace("_", "-"))
            requested[plugin] = (tuple(value.split()), key)

        toolset = Toolset()
        for plugin, (versions, source) in requested.items():
            for version in versions or ("",):
                self._validate(plugin, version, source)
                installed = self._is_installed(installs_dir, plugin, version)
                toolset.versions.append(ToolVersion(plugin, version, source, installed))
        logger.debug("resolved %d tool versions", len(toolset.versions))
        return toolset
