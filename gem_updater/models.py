"""Data models for gem-updater.

These Pydantic models represent the core data structures passed between the
outdated detector, the git adapter and the update workflow.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Bundler's outdated tiers, in the order they are scanned."""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


class CommandResult(BaseModel):
    """Captured outcome of one external command.

    Attributes:
        output: Combined stdout and stderr.
        ok: True when the command exited zero.
    """

    output: str
    ok: bool


class UpgradeCandidate(BaseModel):
    """One outdated gem found in a severity tier.

    Attributes:
        name: Gem name as reported by ``bundle outdated``.
        severity: Tier the gem was detected in; the update is scoped to it.
        staleness_score: Approximate ranking value, higher means more stale.
                         See parsing.staleness_score for how it is derived.
    """

    name: str
    severity: Severity
    staleness_score: int = 0


class MergeResult(BaseModel):
    """Outcome of merging another branch into the current one."""

    merged: bool
    output: str = ""


class WorkflowContext(BaseModel):
    """Mutable state of a single update attempt in one working tree.

    Only one context is active per working tree at a time. ``original_branch``
    is filled in when the update branch is entered and is restored on exit.

    Attributes:
        repository: ``owner/name`` of the GitHub repository.
        project: Optional subdirectory holding the Gemfile.
        workdir: Directory commands run in (repo root or project dir).
        candidate: The gem being updated; None for a ruby version update.
        original_branch: Branch checked out before the update began.
    """

    repository: str
    project: str | None = None
    workdir: Path
    candidate: UpgradeCandidate | None = None
    original_branch: str = ""

    @property
    def subject(self) -> str:
        return self.candidate.name if self.candidate else "ruby"

    @property
    def branch_name(self) -> str:
        return branch_for(self.subject)


class UpdateResult(BaseModel):
    """Records how one update attempt ended.

    Attributes:
        repository: ``owner/name`` of the repository.
        project: Subproject path, if any.
        gem: Gem name, or "ruby" for a ruby version update.
        branch: Update branch that was created or reused.
        status: "updated" when commit and push ran, "failed" otherwise.
        proposal_opened: Whether ``gh pr create`` succeeded.
        message: Short human readable detail.
    """

    repository: str
    project: str | None = None
    gem: str
    branch: str
    status: Literal["updated", "failed"]
    proposal_opened: bool = False
    message: str = ""


def branch_for(name: str) -> str:
    """Name of the branch an update of ``name`` is made on."""
    return f"update_{name}"


class RunReport(BaseModel):
    """Everything one run did.

    Attributes:
        results: One entry per attempted gem (or ruby) update.
        failed_targets: Repositories/projects that failed before any gem
                        could be attempted (clone, fetch or install errors).
    """

    results: list[UpdateResult] = Field(default_factory=list)
    failed_targets: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_targets and all(
            r.status == "updated" for r in self.results
        )
