"""Shared test fixtures for rtx_doctor tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from rtx_doctor.config import Config
from rtx_doctor.env import EnvSnapshot
from rtx_doctor.errors import GitError
from rtx_doctor.lookup import Lookup


class FakeGit:
    """Stand-in for :class:`rtx_doctor.git.Git` keyed by plugin path name."""

    remotes: dict[str, str] = {}
    revisions: dict[str, str] = {}

    def __init__(self, path: Path) -> None:
        self.path = path

    def get_remote_url(self) -> str | None:
        return self.remotes.get(self.path.name)

    def current_sha_short(self) -> str:
        try:
            return self.revisions[self.path.name]
        except KeyError:
            raise GitError("fatal: not a git repository") from None

    def lookup_revision(self) -> Lookup[str]:
        try:
            return Lookup.found(self.current_sha_short())
        except GitError as exc:
            return Lookup.unavailable(exc.message)


def fake_git(remotes: dict[str, str] | None = None, revisions: dict[str, str] | None = None) -> type[FakeGit]:
    return type("ConfiguredFakeGit", (FakeGit,), {"remotes": remotes or {}, "revisions": revisions or {}})


@pytest.fixture
def runner() -> CliRunner:
    """Provide a CLI test runner."""
    return CliRunner()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path.resolve() / "home"
    path.mkdir()
    return path


@pytest.fixture
def env(home: Path) -> EnvSnapshot:
    """A snapshot rooted in a temporary HOME with nothing configured."""
    return EnvSnapshot({"HOME": str(home)})


@pytest.fixture
def empty_config(env: EnvSnapshot) -> Config:
    return Config(env=env)
