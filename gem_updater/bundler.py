"""Bundler commands used by the updater."""

from __future__ import annotations

from pathlib import Path

from .models import Severity
from .shell import bundle


def install(cwd: Path) -> None:
    """Install the bundle so ``bundle outdated`` sees the locked versions."""
    bundle("install", cwd=cwd)


def outdated(severity: Severity, cwd: Path) -> str:
    """List gems outdated within one tier.

    ``bundle outdated`` exits non-zero whenever something is outdated, so
    the exit status is not checked.
    """
    return bundle("outdated", f"--{severity.value}", cwd=cwd, check=False).output


def update_gem(name: str, severity: Severity, cwd: Path) -> None:
    """Update a single gem without leaving its tier."""
    bundle("update", f"--{severity.value}", name, cwd=cwd)


def update_ruby(cwd: Path) -> None:
    """Re-lock against the ruby version the Gemfile requests."""
    bundle("update", "--ruby", cwd=cwd)
