"""Cradle exceptions.

Every error raised while running a child process derives from CradleError
and carries the quoted command line, so messages read like:

    false foo bar:
      exited with exit code: 1
"""

from typing import List, Optional
from dataclasses import dataclass


class CradleError(Exception):
    """Base class for all errors raised by an invocation."""

    def __init__(self, full_command: str, detail: str):
        self.full_command = full_command
        self.detail = detail
        super().__init__(f"{full_command}:\n  {detail}")


def describe_os_error(error: Exception) -> str:
    """
    Render an OSError the way the OS reports it, e.g. 'Broken pipe (os error 32)'.

    Errors without an errno, such as a ValueError from a closed sink, fall
    back to their message.
    """
    if getattr(error, "errno", None) is None:
        return str(error)
    return f"{error.strerror} (os error {error.errno})"


class NoArgumentsGiven(CradleError):
    """Raised when the command is empty; no process is spawned."""

    def __init__(self):
        self.full_command = ""
        self.detail = "no arguments given"
        Exception.__init__(self, "no arguments given")


class ProcessSpawnFailed(CradleError):
    """Raised when the OS could not create the child process."""

    def __init__(self, program, full_command: str, os_error: OSError):
        self.program = program
        self.os_error = os_error
        super().__init__(full_command, describe_os_error(os_error))


class ChildIoError(CradleError):
    """
    Raised when a relay pipe or sink failed.

    os_error holds the underlying exception. It is an OSError unless a sink
    raised something else.

    The sibling relay threads are never cancelled, so whatever output the
    child produced is still attached.
    """

    def __init__(
        self,
        program,
        full_command: str,
        os_error: Exception,
        stdout: bytes = b"",
        stderr: bytes = b"",
        exit_status=None,
    ):
        self.program = program
        self.os_error = os_error
        self.stdout = stdout
        self.stderr = stderr
        self.exit_status = exit_status
        super().__init__(full_command, describe_os_error(os_error))


class NonZeroExitCode(CradleError):
    """Raised when the child failed and the caller did not ask for its exit status."""

    def __init__(self, full_command: str, exit_status, stdout: bytes = b"", stderr: bytes = b""):
        self.exit_status = exit_status
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(full_command, f"exited with {exit_status}")


class InvalidUtf8ToStdout(CradleError):
    """Captured stdout was requested as text but is not valid UTF-8."""

    def __init__(self, full_command: str):
        super().__init__(full_command, "invalid utf-8 written to stdout")


class InvalidUtf8ToStderr(CradleError):
    """Captured stderr was requested as text but is not valid UTF-8."""

    def __init__(self, full_command: str):
        super().__init__(full_command, "invalid utf-8 written to stderr")


@dataclass
class ValidationError:
    """Single job file validation error."""
    message: str
    path: str = ""
    exit_code: int = 2


class JobValidationError(Exception):
    """Raised when a job file fails validation.

    The loader collects every problem it finds before raising, allowing the
    CLI to report all of them and map to the validation exit code.
    """

    def __init__(self, errors: List[ValidationError], source: Optional[str] = None):
        self.errors = errors
        self.source = source
        self.exit_code = 2

        messages = []
        for error in errors:
            location = f" (at {error.path})" if error.path else ""
            messages.append(f"Validation error: {error.message}{location}")

        super().__init__("\n".join(messages))
