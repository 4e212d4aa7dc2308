"""Shell, git and bundler process helpers.

Every external tool the updater touches goes through run(), which merges
stderr into stdout, logs the command and its raw output, and either raises
CommandFailure or hands back a CommandResult depending on ``check``.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping
from pathlib import Path

from .models import CommandResult

log = logging.getLogger(__name__)


class CommandFailure(Exception):
    """An external command exited non-zero where success was required."""

    def __init__(self, command: list[str], returncode: int, output: str) -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__(f"COMMAND FAILED ({returncode}): {' '.join(command)}")


def run(
    *args: str,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
) -> CommandResult:
    """Run a command, capturing combined stdout/stderr.

    Args:
        *args: Command and arguments (e.g., "bundle", "outdated", "--minor").
        cwd: Working directory; defaults to the current one.
        env: Extra environment variables layered over os.environ.
        check: If True (default), raise CommandFailure on non-zero exit.
               Set to False for commands that may legitimately fail.

    Returns:
        CommandResult with the raw output and success flag.
    """
    command = list(args)
    log.debug("$ %s", " ".join(command))
    full_env = {**os.environ, **env} if env else None
    proc = subprocess.run(
        command,
        cwd=cwd,
        env=full_env,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        stdin=subprocess.DEVNULL,
        text=True,
    )
    if proc.stdout:
        log.debug(proc.stdout.rstrip())
    if check and proc.returncode != 0:
        raise CommandFailure(command, proc.returncode, proc.stdout)
    return CommandResult(output=proc.stdout, ok=proc.returncode == 0)


def git(
    *args: str,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
) -> str:
    """Run a git command and return its stripped output."""
    return run("git", *args, cwd=cwd, env=env, check=check).output.strip()


def gh(
    *args: str,
    cwd: Path | None = None,
    token: str | None = None,
    check: bool = True,
) -> CommandResult:
    """Run a GitHub CLI command, authenticating with ``token`` when given."""
    env = {"GITHUB_TOKEN": token} if token else None
    return run("gh", *args, cwd=cwd, env=env, check=check)


def bundle(*args: str, cwd: Path | None = None, check: bool = True) -> CommandResult:
    """Run a Bundler command."""
    return run("bundle", *args, cwd=cwd, check=check)


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate repositories and projects in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")
