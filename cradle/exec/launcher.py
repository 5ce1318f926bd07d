"""
Process launcher: spawns the child with all three standard streams piped.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import IO

from ..config import Config
from ..context import Context
from ..exceptions import ChildIoError, NoArgumentsGiven, ProcessSpawnFailed


logger = logging.getLogger(__name__)


@dataclass
class SpawnedProcess:
    """
    A running child and its pipe endpoints.

    Each endpoint is handed to exactly one relay thread, which closes it when
    done. The process handle stays with the relay engine until exit.
    """
    process: subprocess.Popen
    stdin: IO[bytes]
    stdout: IO[bytes]
    stderr: IO[bytes]


class ProcessLauncher:
    """Starts OS processes described by a Config."""

    def __init__(self, context: Context):
        self.context = context

    def spawn(self, config: Config) -> SpawnedProcess:
        """
        Start the child process.

        Raises:
            NoArgumentsGiven: config has no program
            ProcessSpawnFailed: the OS refused to create the process
            ChildIoError: the '+ command' log line could not be written
        """
        if not config.arguments:
            raise NoArgumentsGiven()

        full_command = config.full_command()
        if config.log_invocation:
            try:
                self.context.stderr.write(f"+ {full_command}\n".encode("utf-8"))
            except Exception as e:
                raise ChildIoError(config.program, full_command, e) from e

        env = self.context.child_environment()
        for key, value in config.environment_overrides:
            env[key] = value

        cwd = config.working_directory
        if cwd is None:
            cwd = self.context.working_directory

        logger.debug(f"Spawning: {full_command}")
        try:
            # bufsize=0: relay threads see bytes as soon as the child writes them
            process = subprocess.Popen(
                [os.fspath(argument) for argument in config.arguments],
                cwd=cwd,
                env=env,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                bufsize=0,
            )
        except OSError as e:
            logger.debug(f"Failed to spawn {full_command}: {e}")
            raise ProcessSpawnFailed(config.program, full_command, e) from e

        logger.debug(f"Spawned pid {process.pid}: {full_command}")
        return SpawnedProcess(
            process=process,
            stdin=process.stdin,
            stdout=process.stdout,
            stderr=process.stderr,
        )
