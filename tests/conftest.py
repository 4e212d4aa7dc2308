"""Shared test fixtures."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from gem_updater.config import Config


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """A config that neither sleeps nor touches the real cache directory."""
    return Config(
        github_token="t0ken",
        repositories=["acme/shop"],
        cache_dir=tmp_path / "cache",
        proposal_delay=0,
    )


@pytest.fixture
def git_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A real git repository on branch master with one commit.

    HOME points into tmp_path so no user or global git config leaks in.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for var in ("GIT_AUTHOR_NAME", "GIT_COMMITTER_NAME"):
        monkeypatch.setenv(var, "tester")
    for var in ("GIT_AUTHOR_EMAIL", "GIT_COMMITTER_EMAIL"):
        monkeypatch.setenv(var, "tester@example.com")

    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", "-q", "-b", "master"], cwd=repo, check=True)
    (repo / "Gemfile.lock").write_text("GEM\n  specs:\n    rack (2.2.7)\n")
    subprocess.run(["git", "add", "."], cwd=repo, check=True)
    subprocess.run(["git", "commit", "-q", "-m", "initial"], cwd=repo, check=True)
    return repo


OUTDATED_MINOR = """\
Fetching gem metadata from https://rubygems.org/.........
Resolving dependencies...

Outdated gems included in the bundle:
  * foo (newest 2.0.0, installed 1.0.0)
  * bar (newest 1.0.1, installed 1.0.0, requested ~> 1.0)
"""

LOCK_DIFF = """\
diff --git a/Gemfile.lock b/Gemfile.lock
index 1c2d3e4..5f6a7b8 100644
--- a/Gemfile.lock
+++ b/Gemfile.lock
@@ -80,7 +80,7 @@ GEM
    racc (1.7.3)
    rack [-(2.2.7)-]{+(2.2.8)+}
    rack-test (2.1.0)
"""


@pytest.fixture
def outdated_minor() -> str:
    """``bundle outdated --minor`` output with two outdated gems."""
    return OUTDATED_MINOR


@pytest.fixture
def lock_diff() -> str:
    """Word diff of a Gemfile.lock where rack went 2.2.7 → 2.2.8."""
    return LOCK_DIFF


def git_cmd(repo: Path, *args: str) -> str:
    """Run git in ``repo`` for test setup, failing loudly."""
    return subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True
    ).stdout


@pytest.fixture
def git_origin(git_repo: Path, tmp_path: Path) -> Path:
    """Give ``git_repo`` a bare ``origin`` that holds its master branch."""
    origin = tmp_path / "origin.git"
    subprocess.run(["git", "init", "-q", "--bare", str(origin)], check=True)
    git_cmd(git_repo, "remote", "add", "origin", str(origin))
    git_cmd(git_repo, "push", "-q", "origin", "master")
    return origin


@pytest.fixture
def commit_file(git_repo: Path):
    """Write a file in ``git_repo`` and commit it on the current branch."""

    def _commit(name: str, content: str, message: str) -> None:
        (git_repo / name).write_text(content)
        git_cmd(git_repo, "add", name)
        git_cmd(git_repo, "commit", "-q", "-m", message)

    return _commit


@pytest.fixture
def run_git(git_repo: Path):
    """Run git in ``git_repo`` and return its stdout."""
    return lambda *args: git_cmd(git_repo, *args)
