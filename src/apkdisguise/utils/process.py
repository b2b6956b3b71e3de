"""Subprocess wrapper for all external tool invocations."""

import subprocess
from dataclasses import dataclass

from apkdisguise.exceptions import LaunchError
from apkdisguise.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ProcessResult:
    """Result of a subprocess execution."""

    command: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        """Check if the command exited with status zero."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Get stderr followed by stdout, for diagnostics."""
        return f"{self.stderr} {self.stdout}".strip()

    @property
    def lines(self) -> list[str]:
        """Get stdout as a list of lines, blank lines included."""
        return self.stdout.splitlines()


def decode_output(raw: bytes | None) -> str:
    """Decode captured output as UTF-8, replacing malformed sequences."""
    if not raw:
        return ""
    return raw.decode("utf-8", errors="replace")


def run_tool(
    command: list[str],
    *,
    timeout: float | None = None,
    cwd: str | None = None,
) -> ProcessResult:
    """Run an external tool command and wait for it to exit.

    The exit status is recorded but never raised on; callers decide what
    counts as success.

    Args:
        command: Command and arguments to run.
        timeout: Optional timeout in seconds. None waits indefinitely.
        cwd: Working directory for the command.

    Returns:
        ProcessResult with decoded command output.

    Raises:
        LaunchError: If the executable cannot be started.
    """
    logger.debug("Running external tool", command=command)

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            timeout=timeout,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired as e:
        raise LaunchError(command, f"Command timed out after {timeout}s") from e
    except OSError as e:
        raise LaunchError(command, str(e)) from e

    proc_result = ProcessResult(
        command=command,
        returncode=result.returncode,
        stdout=decode_output(result.stdout),
        stderr=decode_output(result.stderr),
    )

    logger.debug(
        "External tool exited",
        executable=command[0],
        returncode=proc_result.returncode,
    )

    return proc_result
