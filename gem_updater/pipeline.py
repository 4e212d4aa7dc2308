"""Update loop: for every configured repository and project, update gems.

Repositories and their projects are processed one at a time, in the order
they were configured, each through its own clone under ``cache_dir``:
1. Clone or fetch the repository
2. Check out and pull the default branch
3. Run the gem update workflow in the repo root or the project directory
"""

from __future__ import annotations

import logging

from . import git
from .config import Config
from .fetcher import RepoFetcher
from .models import RunReport
from .shell import CommandFailure, step
from .updater import GemUpdater

log = logging.getLogger(__name__)


def update_target(
    config: Config, repo: str, project: str | None, report: RunReport
) -> None:
    """Bring one repository (or project inside it) up to date."""
    target = f"{repo}:{project}" if project else repo
    step(f"Updating {target}")

    fetcher = RepoFetcher(
        repo, config.cache_dir, config.github_token, config.default_branch
    )
    try:
        base_branch = fetcher.prepare()
        workdir = fetcher.path / project if project else fetcher.path
        updater = GemUpdater(repo, workdir, config, base_branch, project)
        report.results.extend(updater.run())
    except CommandFailure as e:
        log.error("giving up on %s: %s", target, e)
        report.failed_targets.append(target)


def run_updates(config: Config) -> RunReport:
    """Execute the update loop over every configured repository.

    Returns:
        RunReport listing every attempted update and every failed target.
    """
    git.setup(config.commit_name, config.commit_email, config.github_token)
    config.cache_dir.mkdir(parents=True, exist_ok=True)

    report = RunReport()
    for repo in config.repositories:
        for project in config.projects_for(repo):
            update_target(config, repo, project, report)

    print(f"\n{'=' * 60}\nDone!\n{'=' * 60}")
    return report
