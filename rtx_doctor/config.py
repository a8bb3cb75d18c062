"""Config file discovery, merging and settings precedence.

Files are merged in discovery order: the global config, the global
``.tool-versions``, then every directory from the filesystem root down to the
working directory (``.tool-versions`` before ``.rtx.toml``). A later file
overrides an earlier one. Settings resolve as defaults, then each file's
``[settings]`` table, then ``RTX_*`` environment variables.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

try:
    import tomllib  # type: ignore[import-not-found]
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found, no-redef]

from rtx_doctor.env import ACTIVATION_MARKER, RTX_PREFIX, EnvSnapshot, parse_bool
from rtx_doctor.errors import ConfigError, Suggestion

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    experimental: bool = False
    verbose: bool = False
    jobs: int = 4
    always_keep_download: bool = False
    legacy_version_file: bool = True
    disable_default_shorthands: bool = False
    log_level: str = "info"
    shorthands_file: str | None = None

    def __str__(self) -> str:
        lines = []
        for key, value in self.model_dump().items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = str(value).lower()
            lines.append(f"{key} = {value}")
        return "\n".join(lines)


@dataclass(frozen=True)
class ToolRequest:
    """One ``plugin -> versions`` line from a config file."""

    plugin: str
    versions: tuple[str, ...]
    source: Path


@dataclass
class ConfigFile:
    path: Path
    tools: list[ToolRequest] = field(default_factory=list)
    settings: dict[str, Any] = field(default_factory=dict)
    plugin_urls: dict[str, str] = field(default_factory=dict)


@dataclass
class Config:
    """The merged configuration the rest of rtx sees."""

    env: EnvSnapshot
    config_files: list[ConfigFile] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)

    @property
    def config_paths(self) -> list[Path]:
        return [cf.path for cf in self.config_files]

    @property
    def tool_requests(self) -> list[ToolRequest]:
        return [req for cf in self.config_files for req in cf.tools]

    @property
    def referenced_plugins(self) -> list[str]:
        """Plugin names referenced by any config file, first mention wins."""
        seen: dict[str, None] = {}
        for cf in self.config_files:
            for name in cf.plugin_urls:
                seen.setdefault(name, None)
            for req in cf.tools:
                seen.setdefault(req.plugin, None)
        return list(seen)

    def is_activated(self) -> bool:
        return ACTIVATION_MARKER in self.env


def parse_tool_versions(path: Path) -> ConfigFile:
    """Parse an asdf-style ``.tool-versions`` file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}", code="E1001", details={"path": str(path)}) from exc

    config_file = ConfigFile(path=path)
    for line in text.splitlines():
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        plugin, *versions = line.split()
        config_file.tools.append(ToolRequest(plugin=plugin, versions=tuple(versions), source=path))
    return config_file


def parse_rtx_toml(path: Path) -> ConfigFile:
    """Parse an ``.rtx.toml`` (or global ``config.toml``) file."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}", code="E1001", details={"path": str(path)}) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path}: {exc}",
            code="E1002",
            suggestion=Suggestion(action="fix config file", fix=f"Correct the syntax error in {path}."),
            details={"path": str(path)},
        ) from exc

    config_file = ConfigFile(path=path, settings=_table(data, "settings", path))
    for plugin, value in _table(data, "tools", path).items():
        versions = tuple(str(v) for v in value) if isinstance(value, list) else (str(value),)
        config_file.tools.append(ToolRequest(plugin=plugin, versions=versions, source=path))
    for plugin, url in _table(data, "plugins", path).items():
        config_file.plugin_urls[plugin] = str(url)
    return config_file


def _table(data: dict[str, Any], key: str, path: Path) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(
            f"Invalid TOML in {path}: [{key}] must be a table",
            code="E1002",
            suggestion=Suggestion(action="fix config file", fix=f"Declare {key} as a [{key}] table in {path}."),
            details={"path": str(path), "key": key},
        )
    return dict(value)


def discover_config_files(env: EnvSnapshot, cwd: Path) -> list[Path]:
    """Return existing config files, lowest precedence first."""
    candidates = [
        env.config_dir / "config.toml",
        env.home / env.tool_versions_filename,
    ]
    cwd = cwd.resolve()
    for directory in [*reversed(cwd.parents), cwd]:
        candidates.append(directory / env.tool_versions_filename)
        candidates.append(directory / env.config_filename)

    found: list[Path] = []
    for candidate in candidates:
        if candidate.is_file() and candidate not in found:
            found.append(candidate)
    return found


def _env_settings(env: EnvSnapshot) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for key, info in Settings.model_fields.items():
        raw = env.get(f"{RTX_PREFIX}{key.upper()}")
        if raw is None:
            continue
        parsed = parse_bool(raw) if info.annotation is bool else None
        overrides[key] = raw if parsed is None else parsed
    if env.flag("RTX_DEBUG"):
        overrides["log_level"] = "debug"
    return overrides


def resolve_settings(config_files: list[ConfigFile], env: EnvSnapshot) -> Settings:
    merged: dict[str, Any] = {}
    for cf in config_files:
        merged.update(cf.settings)
    merged.update(_env_settings(env))
    try:
        return Settings(**merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}", code="E1003") from exc


def load_config(env: EnvSnapshot, cwd: Path | None = None) -> Config:
    config_files: list[ConfigFile] = []
    for path in discover_config_files(env, cwd or Path.cwd()):
        logger.debug("loading config file %s", path)
        if path.suffix == ".toml":
            config_files.append(parse_rtx_toml(path))
        else:
            config_files.append(parse_tool_versions(path))
    return Config(env=env, config_files=config_files, settings=resolve_settings(config_files, env))
