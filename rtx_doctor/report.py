"""Structured doctor report and the collectors that fill it.

Nothing here styles or pads text; see :mod:`rtx_doctor.render`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from pydantic import BaseModel, Field

from rtx_doctor.config import Settings
from rtx_doctor.env import EnvSnapshot
from rtx_doctor.git import Git
from rtx_doctor.plugins import PluginRecord
from rtx_doctor.shell import ShellInfo

UNKNOWN: str = "(unknown)"


class EnvVar(BaseModel):
    key: str
    value: str


class ConfigFileEntry(BaseModel):
    path: str


class PluginRow(BaseModel):
    """One row of the plugins section.

    ``remote_url`` and ``revision`` are both set or both None; a revision that
    could not be read is :data:`UNKNOWN`.
    """

    name: str
    installed: bool
    remote_url: str | None = None
    revision: str | None = None


class Problem(BaseModel):
    message: str
    command: str | None = None
    """Command the user should run, highlighted when rendered."""


class DiagnosticReport(BaseModel):
    version: str
    shell: ShellInfo
    env_vars: list[EnvVar] = Field(default_factory=list)
    settings: Settings = Field(default_factory=Settings)
    config_files: list[ConfigFileEntry] = Field(default_factory=list)
    """Highest precedence first."""
    plugins: list[PluginRow] = Field(default_factory=list)
    toolset: str = ""
    problems: list[Problem] = Field(default_factory=list)
    exit_code: int = 0


def collect_env_vars(env: EnvSnapshot) -> list[EnvVar]:
    return [EnvVar(key=k, value=v) for k, v in env.rtx_vars()]


def collect_config_files(paths: Sequence[Path]) -> list[ConfigFileEntry]:
    """Reverse discovery order so the most overriding file comes first."""
    return [ConfigFileEntry(path=str(p)) for p in reversed(paths)]


def collect_plugins(
    plugins: Iterable[PluginRecord],
    git_factory: Callable[[Path], Git] = Git,
) -> list[PluginRow]:
    rows: list[PluginRow] = []
    for plugin in plugins:
        git = git_factory(plugin.install_path)
        url = git.get_remote_url()
        if url is None:
            rows.append(PluginRow(name=plugin.name, installed=plugin.installed))
            continue
        revision = git.lookup_revision().value_or(UNKNOWN)
        rows.append(PluginRow(name=plugin.name, installed=plugin.installed, remote_url=url, revision=revision))
    return rows
