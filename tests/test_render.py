"""Tests for report collection and text rendering."""

from __future__ import annotations

import json
from pathlib import Path

from conftest import fake_git

from rtx_doctor.config import Settings
from rtx_doctor.env import EnvSnapshot
from rtx_doctor.plugins import PluginRecord
from rtx_doctor.render import TextRenderer, render_json, resolve_no_color
from rtx_doctor.report import (
    DiagnosticReport,
    PluginRow,
    Problem,
    collect_config_files,
    collect_env_vars,
    collect_plugins,
)
from rtx_doctor.shell import ShellInfo


def _plugins(*names: str, installed: bool = True) -> list[PluginRecord]:
    return [PluginRecord(n, Path("/plugins") / n, installed) for n in names]


def _report(**kwargs) -> DiagnosticReport:
    kwargs.setdefault("version", "1.0.0")
    kwargs.setdefault("shell", ShellInfo())
    return DiagnosticReport(**kwargs)


class TestCollect:

    def test_env_vars(self):
        env = EnvSnapshot({"RTX_B": "2", "HOME": "/h", "RTX_A": "1"})
        assert [(v.key, v.value) for v in collect_env_vars(env)] == [("RTX_B", "2"), ("RTX_A", "1")]

    def test_config_files_reversed(self):
        paths = [Path("/global.toml"), Path("/home/.tool-versions"), Path("/proj/.rtx.toml")]
        rendered = [e.path for e in collect_config_files(paths)]
        assert rendered == ["/proj/.rtx.toml", "/home/.tool-versions", "/global.toml"]
        assert [Path(p) for p in reversed(rendered)] == paths

    def test_plugins_remote_and_revision(self):
        git = fake_git(remotes={"node": "https://github.com/x/node"}, revisions={"node": "abc1234"})
        [row] = collect_plugins(_plugins("node"), git)
        assert row == PluginRow(name="node", installed=True, remote_url="https://github.com/x/node", revision="abc1234")

    def test_revision_failure_is_unknown(self):
        git = fake_git(remotes={"node": "github.com/x/node"})
        [row] = collect_plugins(_plugins("node"), git)
        assert row.revision == "(unknown)"

    def test_no_remote_no_revision(self):
        git = fake_git(revisions={"go": "abc1234"})
        [row] = collect_plugins(_plugins("go", installed=False), git)
        assert row.remote_url is None
        assert row.revision is None
        assert row.installed is False


class TestText:

    def test_sections_in_order(self):
        text = TextRenderer(color=False).report(_report())
        headers = [line for line in text.splitlines() if line.endswith(":") and not line.startswith(" ")]
        assert headers == [
            "rtx version:",
            "shell:",
            "rtx environment variables:",
            "settings:",
            "config files:",
            "plugins:",
            "toolset:",
        ]

    def test_env_vars_none_marker(self):
        text = TextRenderer(color=False).env_vars(_report())
        assert text == "rtx environment variables:\n  (none)\n"

    def test_shell_unknown(self):
        assert TextRenderer(color=False).shell(ShellInfo()) == "shell:\n  (unknown)\n"

    def test_shell_version_and_error(self):
        renderer = TextRenderer(color=False)
        ok = ShellInfo(name="zsh", command="/bin/zsh", version="zsh 5.9")
        assert renderer.shell(ok) == "shell:\n  /bin/zsh\n  zsh 5.9\n"
        failed = ShellInfo(name="fish", command="fish", probe_error="failed to get shell version: not found")
        assert renderer.shell(failed) == "shell:\n  fish\n  failed to get shell version: not found\n"

    def test_plugin_names_padded_to_longest(self):
        rows = [
            PluginRow(name="bun", installed=True, remote_url="u1", revision="r1"),
            PluginRow(name="clojure", installed=True, remote_url="u2", revision="r2"),
            PluginRow(name="deno_", installed=True, remote_url="u3", revision="r3"),
        ]
        lines = TextRenderer(color=False).plugins(rows).splitlines()[1:]
        assert lines == ["  bun     u1#r1", "  clojure u2#r2", "  deno_   u3#r3"]

    def test_empty_plugins_header_only(self):
        assert TextRenderer(color=False).plugins([]) == "plugins:\n"

    def test_settings_and_toolset_indented(self):
        report = _report(settings=Settings(jobs=2), toolset="node 20 (/p/.tool-versions)")
        renderer = TextRenderer(color=False)
        assert "  jobs = 2\n" in renderer.settings(report)
        assert renderer.toolset(report) == "toolset:\n  node 20 (/p/.tool-versions)\n"

    def test_summary_no_problems(self):
        assert TextRenderer(color=False).summary([]) == "No problems found\n"

    def test_summary_singular_and_plural(self):
        renderer = TextRenderer(color=False)
        one = renderer.summary([Problem(message="a")])
        assert one.splitlines()[0] == "1 problem found:"
        two = renderer.summary([Problem(message="a"), Problem(message="b")])
        assert two.splitlines()[0] == "2 problems found:"
        assert two == "2 problems found:\na\n\nb\n\n"

    def test_color_styles_headers_summary_and_command(self):
        renderer = TextRenderer(color=True)
        assert "\x1b[1m" in renderer.version("1.0.0")
        summary = renderer.summary([Problem(message="run `rtx activate` now", command="rtx activate")])
        assert "\x1b[31m" in summary
        assert "\x1b[33mrtx activate" in summary


def test_render_json_round_trips() -> None:
    report = _report(problems=[Problem(message="plugin go is not installed")], exit_code=1)
    payload = json.loads(render_json(report))
    assert payload["exit_code"] == 1
    assert payload["problems"] == [{"message": "plugin go is not installed", "command": None}]
    assert payload["shell"]["name"] is None


def test_resolve_no_color() -> None:
    assert resolve_no_color(True, {})
    assert resolve_no_color(False, {"NO_COLOR": "1"})
    assert not resolve_no_color(False, {})


def test_no_color_reads_only_the_given_snapshot(monkeypatch) -> None:
    monkeypatch.setenv("NO_COLOR", "1")
    assert not resolve_no_color(False, EnvSnapshot({}))
