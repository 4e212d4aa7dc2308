"""Per-repository update workflow: install → rank → update each gem.

Each gem is updated on its own ``update_<gem>`` branch:
1. Enter the branch (created from the current HEAD if it doesn't exist)
2. Merge the default branch in; on conflict take its lock file instead
3. ``bundle update --<tier> <gem>``
4. Commit and push
5. Wait briefly, then open a pull request with changelog links
6. Return to the branch we started on

A gem whose steps fail is reset and skipped; the next gem starts from the
original branch with a clean tree. Commits already made on a failed gem's
branch are left alone since nothing else shares that branch.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from . import bundler
from .config import Config
from .git import Git
from .metadata import source_uri
from .models import UpdateResult, UpgradeCandidate, WorkflowContext
from .outdated import detect
from .parsing import compare_links, lock_version_change
from .shell import CommandFailure

log = logging.getLogger(__name__)

PROPOSAL_PREFIX = "[GemUpdater]"


class GemUpdater:
    """Runs the update workflow in one checkout (repo root or subproject)."""

    def __init__(
        self,
        repository: str,
        workdir: Path,
        config: Config,
        base_branch: str,
        project: str | None = None,
    ) -> None:
        self.repository = repository
        self.workdir = workdir
        self.config = config
        self.base_branch = base_branch
        self.project = project
        self.git = Git(workdir, config.github_token)

    def run(self) -> list[UpdateResult]:
        """Install, rank outdated gems and update the top ``update_limit``."""
        bundler.install(self.workdir)
        results: list[UpdateResult] = []
        if self.config.update_ruby:
            results.append(self.update_ruby())
        candidates = detect(self.workdir)[: self.config.update_limit]
        for candidate in candidates:
            results.append(self.update_gem(candidate))
        return results

    def context(self, candidate: UpgradeCandidate | None = None) -> WorkflowContext:
        return WorkflowContext(
            repository=self.repository,
            project=self.project,
            workdir=self.workdir,
            candidate=candidate,
        )

    def update_gem(self, candidate: UpgradeCandidate) -> UpdateResult:
        ctx = self.context(candidate)
        return self._update_on_branch(
            ctx,
            upgrade=lambda: bundler.update_gem(
                candidate.name, candidate.severity, self.workdir
            ),
            message=f"update {candidate.name}",
            body=lambda: self.proposal_body(candidate.name),
        )

    def update_ruby(self) -> UpdateResult:
        return self._update_on_branch(
            self.context(),
            upgrade=lambda: bundler.update_ruby(self.workdir),
            message="update ruby version",
            body=lambda: "",
        )

    def _update_on_branch(
        self,
        ctx: WorkflowContext,
        upgrade: Callable[[], None],
        message: str,
        body: Callable[[], str],
    ) -> UpdateResult:
        log.info("updating %s in %s", ctx.subject, self.repository)
        try:
            with self.git.switched_branch(ctx.branch_name) as original:
                ctx.original_branch = original
                try:
                    self.merge_base_branch()
                    upgrade()
                    self.git.commit(message)
                    pushed = self.git.push()
                    # GitHub needs a moment before it knows about the branch
                    time.sleep(self.config.proposal_delay)
                    opened = self.git.propose_change(
                        f"{PROPOSAL_PREFIX} {message}", body(), self.base_branch
                    )
                except CommandFailure:
                    self.git.reset()
                    raise
        except CommandFailure as e:
            log.error("updating %s failed: %s", ctx.subject, e)
            return self._result(ctx, "failed", message=str(e))

        if not pushed:
            return self._result(ctx, "failed", opened, "push failed")
        return self._result(ctx, "updated", opened)

    def _result(
        self, ctx: WorkflowContext, status: str, opened: bool = False, message: str = ""
    ) -> UpdateResult:
        return UpdateResult(
            repository=ctx.repository,
            project=ctx.project,
            gem=ctx.subject,
            branch=ctx.branch_name,
            status=status,
            proposal_opened=opened,
            message=message,
        )

    def merge_base_branch(self) -> None:
        """Merge the default branch in, resolving conflicts with its lock file.

        Conflicts are assumed to come from the lock file; the default
        branch's copy is taken and committed, and the gem update that follows
        re-resolves it. Failures while doing so propagate.
        """
        result = self.git.merge_from(self.base_branch)
        if result.merged:
            return
        log.warning(
            "merging %s failed, taking its %s", self.base_branch, self.config.lock_file
        )
        self.git.checkout_path(self.base_branch, self.config.lock_file)
        self.git.commit(f"merge {self.base_branch}")

    def proposal_body(self, gem: str) -> str:
        """Source link plus compare links for the version bump, when known."""
        uri = source_uri(gem)
        diff = self.git.diff(self.base_branch, self.config.lock_file)
        links = compare_links(uri, lock_version_change(diff, gem))
        return "\n\n".join(part for part in (uri, links) if part)
