"""Local clones of the repositories being updated."""

from __future__ import annotations

import logging
from pathlib import Path

from .git import Git, clone_github

log = logging.getLogger(__name__)


class RepoFetcher:
    """Keeps ``<cache_dir>/<name>`` in step with ``owner/name`` on GitHub."""

    def __init__(
        self,
        repo: str,
        cache_dir: Path,
        token: str | None = None,
        default_branch: str | None = None,
    ) -> None:
        self.repo = repo
        self.cache_dir = cache_dir
        self.token = token
        self._default_branch = default_branch

    @property
    def path(self) -> Path:
        return self.cache_dir / self.repo.split("/")[-1]

    def ensure_ready(self) -> Path:
        """Fetch an existing clone or clone afresh.

        Fetching doesn't touch the checked-out files; call
        checkout_default() afterwards to bring the tree up to date.
        """
        if self.path.exists():
            log.info("repo %s exists -> fetching remote", self.repo)
            Git(self.path, self.token).fetch()
        else:
            log.info("cloning repo %s", self.repo)
            clone_github(self.repo, self.cache_dir)
        return self.path

    def checkout_default(self) -> str:
        """Check out and pull the default branch, returning its name."""
        git = Git(self.path, self.token)
        branch = self._default_branch or git.default_branch()
        git.checkout(branch)
        git.pull()
        return branch

    def prepare(self) -> str:
        """ensure_ready() then checkout_default()."""
        self.ensure_ready()
        return self.checkout_default()
