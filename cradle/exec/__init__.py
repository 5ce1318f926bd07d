"""
Execution module for cradle.
Handles process spawning, concurrent stream relaying, and raw results.
"""

from .launcher import ProcessLauncher, SpawnedProcess
from .relay import RelayEngine
from .result import ExitStatus, RunResult

__all__ = [
    "ProcessLauncher",
    "SpawnedProcess",
    "RelayEngine",
    "ExitStatus",
    "RunResult",
]
