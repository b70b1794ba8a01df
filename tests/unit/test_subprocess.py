"""Tests for subprocess wrapper with rich error context."""

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from derpvis.core.subprocess import run_subprocess_with_context


def test_success_case_returns_completed_process() -> None:
    """Test that successful subprocess execution returns CompletedProcess."""
    with patch("derpvis.core.subprocess.subprocess.run") as mock_run:
        mock_result = Mock(spec=subprocess.CompletedProcess)
        mock_result.returncode = 0
        mock_result.stdout = "Already up to date."
        mock_run.return_value = mock_result

        result = run_subprocess_with_context(
            ["git", "pull", "origin"],
            operation_context="pull 'origin'",
            cwd=Path("/repo"),
        )

        assert result == mock_result
        mock_run.assert_called_once_with(
            ["git", "pull", "origin"],
            cwd=Path("/repo"),
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
            timeout=None,
            env=None,
        )


def test_failure_with_stderr_includes_stderr_in_error() -> None:
    """Test that subprocess failure with stderr includes stderr in error message."""
    with patch("derpvis.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            returncode=128,
            cmd=["git", "clone", "git@host:gone.git", "/src/gone"],
            stderr="fatal: Could not read from remote repository.",
        )

        with pytest.raises(RuntimeError) as exc_info:
            run_subprocess_with_context(
                ["git", "clone", "git@host:gone.git", "/src/gone"],
                operation_context="clone 'git@host:gone.git' into /src/gone",
            )

        error_message = str(exc_info.value)
        assert "Failed to clone 'git@host:gone.git' into /src/gone" in error_message
        assert "Command: git clone git@host:gone.git /src/gone" in error_message
        assert "Exit code: 128" in error_message
        assert "stderr: fatal: Could not read from remote repository." in error_message


def test_failure_with_whitespace_stderr_omits_stderr_line() -> None:
    """Test that subprocess failure with blank stderr omits the stderr line."""
    with patch("derpvis.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            returncode=1, cmd=["git", "push"], stderr="   \n  "
        )

        with pytest.raises(RuntimeError) as exc_info:
            run_subprocess_with_context(["git", "push"], operation_context="push /repo")

        assert "stderr:" not in str(exc_info.value)


def test_exception_chaining_preserved() -> None:
    """Test that original CalledProcessError is preserved via exception chaining."""
    with patch("derpvis.core.subprocess.subprocess.run") as mock_run:
        original_error = subprocess.CalledProcessError(
            returncode=1, cmd=["git", "status"], stderr="fatal: not a git repository"
        )
        mock_run.side_effect = original_error

        with pytest.raises(RuntimeError) as exc_info:
            run_subprocess_with_context(["git", "status"], operation_context="read status")

        assert exc_info.value.__cause__ is original_error


def test_timeout_becomes_runtime_error() -> None:
    """Test that a hung command surfaces as RuntimeError naming the timeout."""
    with patch("derpvis.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["git", "pull"], timeout=30)

        with pytest.raises(RuntimeError) as exc_info:
            run_subprocess_with_context(
                ["git", "pull"], operation_context="pull 'origin'", timeout=30
            )

        assert "Timed out after 30s while trying to pull 'origin'" in str(exc_info.value)


def test_missing_binary_becomes_runtime_error() -> None:
    """Test that a missing executable surfaces as RuntimeError."""
    with patch("derpvis.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = FileNotFoundError("git")

        with pytest.raises(RuntimeError) as exc_info:
            run_subprocess_with_context(["git", "status"], operation_context="read status")

        assert "Command not found while trying to read status: git" in str(exc_info.value)
