"""
I/O relay engine.

Pumps bytes between the parent and a spawned child on three threads: one
feeds stdin, one drains stdout, one drains stderr. Servicing the pipes
one at a time would deadlock against a child that fills one pipe while we
block on another, so all three run at once and are always joined, even
when one of them fails early.
"""

import logging
import threading
from typing import IO, List, Optional

from ..config import Config
from ..context import Context, Sink
from ..exceptions import ChildIoError
from .launcher import SpawnedProcess
from .result import ExitStatus, RunResult


logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class RelayEngine:
    """
    Runs the relay threads for one invocation and collects the result.

    The first error hit by any thread is remembered and raised as
    ChildIoError once every thread has finished and the child has exited,
    with whatever output was captured attached. Besides pipe OSErrors this
    includes anything a sink raises, e.g. ValueError from a closed stream.
    """

    def __init__(self, context: Context, config: Config):
        self.context = context
        self.config = config
        self._stdout_chunks: List[bytes] = []
        self._stderr_chunks: List[bytes] = []
        self._errors: List[Exception] = []
        self._errors_lock = threading.Lock()

    def run(self, spawned: SpawnedProcess) -> RunResult:
        """Relay until stdout and stderr are closed, then wait for the child's exit."""
        threads = [
            threading.Thread(
                target=self._feed_stdin,
                args=(spawned.stdin,),
                name="cradle-stdin",
            ),
            threading.Thread(
                target=self._drain,
                args=(spawned.stdout, self._stdout_chunks, self.config.capture_stdout,
                      self.context.stdout if self.config.relay_stdout else None),
                name="cradle-stdout",
            ),
            threading.Thread(
                target=self._drain,
                args=(spawned.stderr, self._stderr_chunks, self.config.capture_stderr,
                      self.context.stderr if self.config.relay_stderr else None),
                name="cradle-stderr",
            ),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        exit_status = ExitStatus(spawned.process.wait())
        logger.debug(f"{self.config.full_command()} finished with {exit_status}")

        stdout = b"".join(self._stdout_chunks)
        stderr = b"".join(self._stderr_chunks)

        if self._errors:
            error = self._errors[0]
            raise ChildIoError(
                self.config.program,
                self.config.full_command(),
                error,
                stdout=stdout,
                stderr=stderr,
                exit_status=exit_status,
            ) from error

        return RunResult(stdout=stdout, stderr=stderr, exit_status=exit_status)

    def _record_error(self, error: Exception) -> None:
        logger.debug(f"Relay error for {self.config.full_command()}: {error}")
        with self._errors_lock:
            self._errors.append(error)

    def _feed_stdin(self, pipe: IO[bytes]) -> None:
        try:
            for buffer in self.config.stdin_payload:
                view = memoryview(buffer)
                while view:
                    written = pipe.write(view)
                    view = view[written:]
        except OSError as e:
            # Typically BrokenPipeError: the child exited or closed stdin early
            self._record_error(e)
        finally:
            self._close(pipe)

    def _drain(
        self,
        pipe: IO[bytes],
        chunks: List[bytes],
        capture: bool,
        sink: Optional[Sink],
    ) -> None:
        try:
            while True:
                chunk = pipe.read(CHUNK_SIZE)
                if not chunk:
                    break
                if capture:
                    chunks.append(chunk)
                if sink is not None:
                    try:
                        sink.write(chunk)
                    except Exception as e:
                        # Keep draining so the child never blocks on a full pipe
                        self._record_error(e)
                        sink = None
        except OSError as e:
            self._record_error(e)
        finally:
            self._close(pipe)

    def _close(self, pipe: IO[bytes]) -> None:
        try:
            pipe.close()
        except OSError as e:
            self._record_error(e)
