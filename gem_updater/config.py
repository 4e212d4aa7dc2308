"""Run configuration.

Settings come from an optional TOML file and the environment, with the
environment winning. The resulting Config is built once by the CLI and
passed down explicitly.

Environment variables:
    GITHUB_TOKEN   token for pushes and ``gh pr create``
    UPDATE_LIMIT   gems to update per repository/project (default 2)
    REPOSITORIES   space separated ``owner/name`` list
    PROJECTS       space separated ``owner/name:subdir`` pairs
    DEBUG, VERBOSE either one enables debug logging
"""

from __future__ import annotations

import os
import warnings
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_UPDATE_LIMIT = 2


class ConfigurationWarning(UserWarning):
    """Required configuration is missing; the run continues regardless."""


class Config(BaseModel):
    """Settings for one updater run.

    Attributes:
        github_token: Token for HTTPS pushes and pull requests.
        update_limit: Maximum number of gems updated per repository/project.
        repositories: ``owner/name`` repositories, processed in order.
        projects: Per repository, subdirectories holding their own Gemfile.
        cache_dir: Where repositories are cloned.
        default_branch: Branch updates merge from and target. None means
                        whatever ``origin/HEAD`` names, else "master".
        lock_file: Lock file restored from the default branch on conflicts.
        proposal_delay: Seconds to wait after pushing before opening the PR.
        update_ruby: Also propose a ``bundle update --ruby`` branch.
    """

    model_config = ConfigDict(extra="forbid")

    github_token: str | None = None
    update_limit: int = Field(default=DEFAULT_UPDATE_LIMIT, ge=0)
    repositories: list[str] = Field(default_factory=list)
    projects: dict[str, list[str]] = Field(default_factory=dict)
    cache_dir: Path = Path("repositories_cache")
    default_branch: str | None = None
    lock_file: str = "Gemfile.lock"
    proposal_delay: float = 2.0
    update_ruby: bool = False
    commit_name: str = "gemupdater"
    commit_email: str = "gemupdater@gemupdater.com"
    verbose: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        return cls(**env_settings(os.environ if environ is None else environ))

    def projects_for(self, repo: str) -> list[str | None]:
        """Subprojects to update in ``repo``; ``[None]`` means the repo root."""
        return list(self.projects.get(repo) or [None])

    def check(self) -> None:
        """Warn about settings a useful run needs but can do without."""
        if not self.repositories:
            warnings.warn(
                "please provide REPOSITORIES to update",
                ConfigurationWarning,
                stacklevel=2,
            )
        if not self.github_token:
            warnings.warn(
                "please provide GITHUB_TOKEN", ConfigurationWarning, stacklevel=2
            )


def parse_repositories(value: str) -> list[str]:
    return value.split()


def parse_projects(value: str) -> dict[str, list[str]]:
    """Group ``repo:subdir`` pairs by repository, keeping their order."""
    projects: dict[str, list[str]] = {}
    for pair in value.split():
        repo, _, project = pair.partition(":")
        if not project:
            continue
        projects.setdefault(repo, []).append(project)
    return projects


def env_settings(environ: Mapping[str, str]) -> dict[str, Any]:
    """Config fields present in the environment."""
    settings: dict[str, Any] = {}
    if environ.get("GITHUB_TOKEN"):
        settings["github_token"] = environ["GITHUB_TOKEN"]
    if environ.get("UPDATE_LIMIT"):
        settings["update_limit"] = environ["UPDATE_LIMIT"]
    if "REPOSITORIES" in environ:
        settings["repositories"] = parse_repositories(environ["REPOSITORIES"])
    if "PROJECTS" in environ:
        settings["projects"] = parse_projects(environ["PROJECTS"])
    if environ.get("DEBUG") or environ.get("VERBOSE"):
        settings["verbose"] = True
    return settings


def file_settings(path: Path) -> dict[str, Any]:
    """Read settings from a TOML file with Config field names as keys."""
    return tomlkit.parse(path.read_text()).unwrap()


def load_config(
    path: Path | None = None, environ: Mapping[str, str] | None = None
) -> Config:
    """Build a Config from ``path`` (if given) overlaid with the environment."""
    settings = file_settings(path) if path else {}
    settings.update(env_settings(os.environ if environ is None else environ))
    return Config(**settings)
