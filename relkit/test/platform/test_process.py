"""Tests for relkit.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from relkit.core.result import Err, Ok
from relkit.platform.process import ProcessError, find_missing, run, run_silent


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(
            command=("git", "status"),
            returncode=1,
            stdout="",
            stderr="fatal: not a git repository",
        )
        assert str(error) == "git status failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("github-release", "upload", "--user", "acme", "--repo", "widget"),
            returncode=1,
            stdout="",
            stderr="error",
        )
        assert str(error) == "github-release upload --user ... failed (exit 1)"

    def test_detail_prefers_stderr(self) -> None:
        assert ProcessError(("x",), 1, "out", " err\n").detail == "err"
        assert ProcessError(("x",), 1, "out\n", "").detail == "out"
        assert ProcessError(("x",), 1, "", "").detail is None

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "import sys; sys.exit(42)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 42

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1

    def test_extra_env_is_merged(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RELKIT_BASE", "base")
        code = "import os; print(os.environ['RELKIT_BASE'], os.environ['RELKIT_EXTRA'])"
        result = run([sys.executable, "-c", code], cwd=tmp_path, env={"RELKIT_EXTRA": "extra"})

        assert isinstance(result, Ok)
        assert result.value.split() == ["base", "extra"]

    def test_timeout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "import time; time.sleep(5)"], cwd=tmp_path, timeout=0.2)

        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr


class TestRunSilent:
    def test_success(self, tmp_path: Path) -> None:
        assert run_silent([sys.executable, "-c", "pass"], cwd=tmp_path) == Ok(None)

    def test_failure(self, tmp_path: Path) -> None:
        result = run_silent([sys.executable, "-c", "raise SystemExit(3)"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 3


class TestFindMissing:
    def test_reports_only_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import relkit.platform.process as process_mod

        monkeypatch.setattr(
            process_mod.shutil, "which", lambda name: "/usr/bin/git" if name == "git" else None
        )
        assert find_missing(("git", "github-release")) == ["github-release"]
