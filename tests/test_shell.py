"""Tests for gem_updater.shell."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from gem_updater.models import CommandResult
from gem_updater.shell import CommandFailure, gh, run


def _py(code: str) -> tuple[str, ...]:
    return (sys.executable, "-c", code)


class TestRun:
    def test_captures_stdout_and_stderr(self) -> None:
        result = run(*_py("import sys; print('out'); print('err', file=sys.stderr)"))

        assert result.ok
        assert "out" in result.output
        assert "err" in result.output

    def test_raises_on_failure_by_default(self) -> None:
        with pytest.raises(CommandFailure) as excinfo:
            run(*_py("import sys; print('conflict'); sys.exit(3)"))

        assert excinfo.value.returncode == 3
        assert "conflict" in excinfo.value.output
        assert excinfo.value.command[0] == sys.executable

    def test_check_false_reports_failure(self) -> None:
        result = run(*_py("import sys; sys.exit(1)"), check=False)

        assert result == CommandResult(output="", ok=False)

    def test_extra_env_is_layered(self) -> None:
        result = run(
            *_py("import os; print(os.environ['GEM_UPDATER_X'], 'PATH' in os.environ)"),
            env={"GEM_UPDATER_X": "yes"},
        )

        assert result.output.split() == ["yes", "True"]

    def test_runs_in_cwd(self, tmp_path: Path) -> None:
        result = run(*_py("import os; print(os.getcwd())"), cwd=tmp_path)

        assert Path(result.output.strip()).resolve() == tmp_path.resolve()

    def test_logs_command_and_output(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="gem_updater.shell"):
            run(*_py("print('hello')"))

        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("$ ") for m in messages)
        assert "hello" in messages


@patch("gem_updater.shell.run")
def test_gh_passes_token_in_env(mock_run: MagicMock) -> None:
    gh("pr", "create", token="t0ken", check=False)

    mock_run.assert_called_once_with(
        "gh", "pr", "create", cwd=None, env={"GITHUB_TOKEN": "t0ken"}, check=False
    )


@patch("gem_updater.shell.run")
def test_gh_without_token_inherits_env(mock_run: MagicMock) -> None:
    gh("pr", "list")

    assert mock_run.call_args.kwargs["env"] is None
