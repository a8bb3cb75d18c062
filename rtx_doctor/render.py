"""Text and JSON rendering for the doctor report."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

import click

from rtx_doctor.report import DiagnosticReport, PluginRow, Problem
from rtx_doctor.shell import ShellInfo


def resolve_no_color(no_color_flag: bool, env: Mapping[str, str]) -> bool:
    """Return True if color/markup should be disabled."""

    if no_color_flag:
        return True
    return bool(env.get("NO_COLOR"))


class TextRenderer:
    """Render report sections in the order ``rtx doctor`` prints them."""

    def __init__(self, color: bool = True) -> None:
        self.color = color

    def _style(self, text: str, **styles: Any) -> str:
        return click.style(text, **styles) if self.color else text

    def _section(self, title: str, lines: Sequence[str]) -> str:
        body = "".join(f"  {line}\n" for line in lines)
        return f"{self._style(title, bold=True)}\n{body}"

    def version(self, version: str) -> str:
        return self._section("rtx version:", [version])

    def shell(self, info: ShellInfo) -> str:
        if info.name is None:
            return self._section("shell:", ["(unknown)"])
        detail = info.version if info.version is not None else info.probe_error
        lines = [info.command or info.name, *(detail or "").splitlines()]
        return self._section("shell:", lines)

    def env_vars(self, report: DiagnosticReport) -> str:
        lines = [f"{var.key}={var.value}" for var in report.env_vars] or ["(none)"]
        return self._section("rtx environment variables:", lines)

    def settings(self, report: DiagnosticReport) -> str:
        return self._section("settings:", str(report.settings).splitlines())

    def config_files(self, report: DiagnosticReport) -> str:
        return self._section("config files:", [entry.path for entry in report.config_files])

    def plugins(self, rows: Sequence[PluginRow]) -> str:
        width = max((len(row.name) for row in rows), default=0)
        lines = []
        for row in rows:
            name = row.name.ljust(width)
            if row.remote_url is None:
                lines.append(name)
            else:
                lines.append(f"{name} {row.remote_url}#{row.revision}")
        return self._section("plugins:", lines)

    def toolset(self, report: DiagnosticReport) -> str:
        return self._section("toolset:", report.toolset.splitlines())

    def report(self, report: DiagnosticReport) -> str:
        sections = [
            self.version(report.version),
            self.shell(report.shell),
            self.env_vars(report),
            self.settings(report),
            self.config_files(report),
            self.plugins(report.plugins),
            self.toolset(report),
        ]
        return "\n".join(sections) + "\n"

    def problem(self, problem: Problem) -> str:
        if problem.command is None:
            return problem.message
        styled = self._style(problem.command, fg="yellow")
        return problem.message.replace(f"`{problem.command}`", f"`{styled}`")

    def summary(self, problems: Sequence[Problem]) -> str:
        if not problems:
            return "No problems found\n"
        plural = "" if len(problems) == 1 else "s"
        header = self._style(f"{len(problems)} problem{plural} found:", fg="red", bold=True)
        return header + "\n" + "".join(f"{self.problem(p)}\n\n" for p in problems)


def render_json(report: DiagnosticReport) -> str:
    return json.dumps(report.model_dump(mode="json"), indent=2)
