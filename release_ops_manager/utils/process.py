"""Runs external commands (git) with secret masking and dry-run support."""

import subprocess
from pathlib import Path

import structlog

from release_ops_manager.utils.masking import SecretMasker

logger = structlog.get_logger(__name__)


class ProcessExecutionError(Exception):
    """Raised when an external command cannot be started or exits with a non-zero code.

    The command line and output carried by this exception are already masked.
    """

    def __init__(self, command_line: str, output: str = "", exit_code: int | None = None) -> None:
        """Initializes the exception with the masked command line and captured output."""
        if exit_code is None:
            message = f"Problems executing command:\n  {command_line}"
        else:
            message = f"Execution of command failed (exit code {exit_code}):\n  {command_line}\nCaptured command output:\n{output}"
        super().__init__(message)
        self.command_line = command_line
        self.output = output
        self.exit_code = exit_code


class ProcessRunner:
    """Runs commands in a working directory.

    Every command line and every piece of captured output is masked before it is
    logged or attached to an exception.
    """

    def __init__(self, work_dir: Path, masker: SecretMasker | None = None, dry_run: bool = False) -> None:
        """Initialize the runner.

        Args:
            work_dir: Directory the commands are executed in.
            masker: Masker for secret values, e.g. the GitHub write token.
            dry_run: When set, commands are only logged and never executed.
        """
        self.work_dir = work_dir
        self.masker = masker or SecretMasker()
        self.dry_run = dry_run

    def with_secret(self, secret: str | None) -> "ProcessRunner":
        """Return a runner that additionally masks the given secret value."""
        return ProcessRunner(self.work_dir, self.masker.with_secret(secret), self.dry_run)

    def run(self, *command_line: str) -> str:
        """Run the command and return its combined stdout/stderr output.

        Raises:
            ProcessExecutionError: If the command cannot be started or exits with a non-zero code.
        """
        masked_command_line = self.masker.mask(" ".join(command_line))
        if self.dry_run:
            logger.info("Skipped executing command", command=masked_command_line)
            return ""

        logger.info("Executing command", command=masked_command_line, work_dir=str(self.work_dir))
        try:
            result = subprocess.run(
                list(command_line),
                cwd=self.work_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise ProcessExecutionError(masked_command_line) from exc

        output = self.masker.mask(result.stdout or "")
        if result.returncode != 0:
            logger.error("Command failed", command=masked_command_line, exit_code=result.returncode)
            raise ProcessExecutionError(masked_command_line, output, result.returncode)
        return output
