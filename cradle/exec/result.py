"""Raw execution results handed from the relay engine to the result assembler."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ExitStatus:
    """
    Exit status of a finished child process.

    Attributes:
        returncode: Return code as reported by subprocess (negative when
            the child was terminated by a signal)
    """
    returncode: int

    @property
    def code(self) -> Optional[int]:
        """Exit code, or None if the child was killed by a signal."""
        if self.returncode < 0:
            return None
        return self.returncode

    @property
    def signal(self) -> Optional[int]:
        if self.returncode < 0:
            return -self.returncode
        return None

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def __str__(self) -> str:
        if self.signal is not None:
            return f"signal: {self.signal}"
        return f"exit code: {self.returncode}"


@dataclass(frozen=True)
class RunResult:
    """Captured bytes of both streams plus the exit status. Written once, never mutated."""
    stdout: bytes
    stderr: bytes
    exit_status: ExitStatus
