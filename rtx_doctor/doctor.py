"""The doctor engine: gather state, then check it."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from rtx_doctor import __version__
from rtx_doctor.checks import CHECKS, Check, CheckContext, Outcome, run_checks
from rtx_doctor.config import Config, load_config
from rtx_doctor.env import EnvSnapshot
from rtx_doctor.git import Git
from rtx_doctor.lookup import Lookup
from rtx_doctor.plugins import PluginRegistry
from rtx_doctor.report import (
    DiagnosticReport,
    collect_config_files,
    collect_env_vars,
    collect_plugins,
)
from rtx_doctor.shell import ShellInfo, probe_shell
from rtx_doctor.toolset import ToolsetBuilder
from rtx_doctor.versioning import ReleaseChecker

logger = logging.getLogger(__name__)


@dataclass
class Doctor:
    """Everything one ``rtx doctor`` run reads, captured at start.

    :meth:`collect` raises :class:`~rtx_doctor.errors.ToolsetError` when the
    toolset cannot be built; nothing else it calls is allowed to fail.
    """

    config: Config
    registry: PluginRegistry
    latest_version: Callable[[], Lookup[str]]
    toolset_builder: ToolsetBuilder = field(default_factory=ToolsetBuilder)
    git_factory: Callable[[Path], Git] = Git
    shell_prober: Callable[[Mapping[str, str]], ShellInfo] = probe_shell
    current_version: str = __version__
    checks: tuple[Check, ...] = CHECKS

    @property
    def env(self) -> EnvSnapshot:
        return self.config.env

    @classmethod
    def from_environment(cls, env: EnvSnapshot, cwd: Path | None = None) -> Doctor:
        config = load_config(env, cwd)
        registry = PluginRegistry.load(env.plugins_dir, referenced=config.referenced_plugins)
        return cls(
            config=config,
            registry=registry,
            latest_version=ReleaseChecker(env).latest_version,
        )

    def collect(self) -> DiagnosticReport:
        toolset = self.toolset_builder.build(self.config)
        logger.debug("collecting report for %d plugins", len(self.registry))
        return DiagnosticReport(
            version=self.current_version,
            shell=self.shell_prober(self.env),
            env_vars=collect_env_vars(self.env),
            settings=self.config.settings,
            config_files=collect_config_files(self.config.config_paths),
            plugins=collect_plugins(self.registry, self.git_factory),
            toolset=str(toolset),
        )

    def check(self) -> Outcome:
        ctx = CheckContext(
            plugins=list(self.registry),
            current_version=self.current_version,
            latest_version=self.latest_version,
            activated=self.config.is_activated(),
        )
        return run_checks(ctx, self.checks)

    def run(self) -> DiagnosticReport:
        """Collect and check in one go, for callers that want the whole report."""
        report = self.collect()
        outcome = self.check()
        return report.model_copy(update={"problems": outcome.problems, "exit_code": outcome.exit_code})
