"""Success classification for external tool runs.

Some tools report failure through their exit status, others only through
what they print. Each stage of the pipeline is paired with a classifier so
the marker strings live here and not in the control flow.
"""

from dataclasses import dataclass
from typing import Protocol

from apkdisguise.utils.process import ProcessResult

SUCCESS_MARKER = "Success"


class OutcomeClassifier(Protocol):
    """Decides whether a finished tool run succeeded."""

    def succeeded(self, result: ProcessResult) -> bool: ...


@dataclass(frozen=True)
class ExitStatusClassifier:
    """Success means exit status zero."""

    def succeeded(self, result: ProcessResult) -> bool:
        return result.success


@dataclass(frozen=True)
class MarkerClassifier:
    """Success means a literal marker appears in stdout.

    Args:
        marker: Text that must appear in stdout.
        require_exit_status: Also require exit status zero.
    """

    marker: str = SUCCESS_MARKER
    require_exit_status: bool = False

    def succeeded(self, result: ProcessResult) -> bool:
        if self.require_exit_status and not result.success:
            return False
        return self.marker in result.stdout


EXIT_STATUS = ExitStatusClassifier()

# `pm uninstall` exits 0 even when it prints "Failure [...]"
UNINSTALL = MarkerClassifier()

INSTALL = MarkerClassifier(require_exit_status=True)
