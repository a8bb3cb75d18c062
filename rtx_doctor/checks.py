"""Health checks run by ``rtx doctor``.

Checks run in the order of :data:`CHECKS` and every check runs; problems are
reported in that same order.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from rtx_doctor.exit_codes import ExitCode
from rtx_doctor.lookup import Lookup
from rtx_doctor.plugins import PluginRecord
from rtx_doctor.report import Problem
from rtx_doctor.versioning import check_for_new_version

ACTIVATE_COMMAND: str = "rtx activate"


@dataclass(frozen=True)
class CheckContext:
    plugins: Sequence[PluginRecord]
    current_version: str
    latest_version: Callable[[], Lookup[str]]
    activated: bool


Check = Callable[[CheckContext], list[Problem]]


def check_plugins_installed(ctx: CheckContext) -> list[Problem]:
    return [
        Problem(message=f"plugin {plugin.name} is not installed")
        for plugin in ctx.plugins
        if not plugin.installed
    ]


def check_latest_version(ctx: CheckContext) -> list[Problem]:
    latest = check_for_new_version(ctx.current_version, ctx.latest_version())
    if latest is None:
        return []
    return [Problem(message=f"new rtx version {latest} available, currently on {ctx.current_version}")]


def check_activated(ctx: CheckContext) -> list[Problem]:
    if ctx.activated:
        return []
    return [
        Problem(
            message=f"rtx is not activated, run `{ACTIVATE_COMMAND}` for setup instructions",
            command=ACTIVATE_COMMAND,
        )
    ]


CHECKS: tuple[Check, ...] = (
    check_plugins_installed,
    check_latest_version,
    check_activated,
)


@dataclass(frozen=True)
class Outcome:
    problems: list[Problem]

    @property
    def ok(self) -> bool:
        return not self.problems

    @property
    def exit_code(self) -> int:
        return int(ExitCode.SUCCESS if self.ok else ExitCode.PROBLEMS_FOUND)


def run_checks(ctx: CheckContext, checks: Sequence[Check] = CHECKS) -> Outcome:
    problems: list[Problem] = []
    for check in checks:
        problems.extend(check(ctx))
    return Outcome(problems=problems)
