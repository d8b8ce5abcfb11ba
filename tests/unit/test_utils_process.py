"""Unit tests for running external commands."""

import sys
from pathlib import Path

import pytest

from release_ops_manager.utils.masking import SecretMasker
from release_ops_manager.utils.process import ProcessExecutionError, ProcessRunner


def test_run_returns_combined_output(tmp_path: Path) -> None:
    """Test that stdout and stderr are both captured."""
    runner = ProcessRunner(tmp_path)

    output = runner.run(sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr)")

    assert "out" in output
    assert "err" in output


def test_run_in_work_dir(tmp_path: Path) -> None:
    """Test that commands run in the working directory."""
    output = ProcessRunner(tmp_path).run(sys.executable, "-c", "import os; print(os.getcwd())")

    assert Path(output.strip()).resolve() == tmp_path.resolve()


def test_failing_command_masks_secret(tmp_path: Path) -> None:
    """Test that a failing command raises with masked command line and output."""
    runner = ProcessRunner(tmp_path).with_secret("s3cr3t")

    with pytest.raises(ProcessExecutionError) as exc_info:
        runner.run(sys.executable, "-c", "import sys; print('token s3cr3t'); sys.exit(3)", "s3cr3t")

    assert exc_info.value.exit_code == 3
    assert "s3cr3t" not in str(exc_info.value)
    assert "s3cr3t" not in exc_info.value.command_line
    assert exc_info.value.output.strip() == "token [SECRET]"


def test_missing_executable(tmp_path: Path) -> None:
    """Test that a command that cannot be started raises ProcessExecutionError."""
    with pytest.raises(ProcessExecutionError) as exc_info:
        ProcessRunner(tmp_path).run("definitely-not-an-installed-command-42")

    assert exc_info.value.exit_code is None


def test_dry_run_executes_nothing(tmp_path: Path) -> None:
    """Test that dry run mode only logs the command."""
    runner = ProcessRunner(tmp_path, SecretMasker(), dry_run=True)

    assert runner.run(sys.executable, "-c", "open('created', 'w').close()") == ""
    assert not (tmp_path / "created").exists()
