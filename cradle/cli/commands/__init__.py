"""CLI command handlers."""

from .exec import exec_command
from .run import run_job

__all__ = ['exec_command', 'run_job']
