"""
Execution config: the per-invocation description of what to run and how.

Built left-to-right by configurators (see inputs.py), adjusted once by the
requested output shape (see outputs.py), then read-only while the child runs.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

Argument = Union[str, bytes, "os.PathLike[str]"]


def _display(argument: Argument) -> str:
    """Render one argument token as text, replacing undecodable bytes."""
    if isinstance(argument, os.PathLike):
        argument = os.fspath(argument)
    if isinstance(argument, bytes):
        return argument.decode("utf-8", errors="replace")
    # str tokens built with os.fsdecode carry invalid bytes as lone surrogates
    return argument.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


def quote_argument(argument: Argument) -> str:
    """Quote a token for log output: empty or whitespace-containing tokens get single quotes."""
    text = _display(argument)
    if text == "" or any(char.isspace() for char in text):
        return f"'{text}'"
    return text


@dataclass
class Config:
    """
    Execution config for a single invocation.

    Attributes:
        arguments: Program followed by its arguments, passed to the OS unchanged
        environment_overrides: (name, value) pairs applied in order on top of
            the inherited environment
        working_directory: Working directory for the child (None inherits)
        stdin_payload: Buffers concatenated and written to the child's stdin;
            empty means stdin is closed immediately
        capture_stdout: Collect stdout into memory
        capture_stderr: Collect stderr into memory
        relay_stdout: Forward stdout to the context's stdout sink
        relay_stderr: Forward stderr to the context's stderr sink
        fail_on_non_zero_exit: Treat a failing exit status as an error
        log_invocation: Write '+ <command>' to the stderr sink before spawning
    """
    arguments: List[Argument] = field(default_factory=list)
    environment_overrides: List[Tuple[str, str]] = field(default_factory=list)
    working_directory: Optional[Union[str, "os.PathLike[str]"]] = None
    stdin_payload: List[bytes] = field(default_factory=list)
    capture_stdout: bool = False
    capture_stderr: bool = False
    relay_stdout: bool = True
    relay_stderr: bool = True
    fail_on_non_zero_exit: bool = True
    log_invocation: bool = False

    @property
    def program(self) -> Optional[Argument]:
        return self.arguments[0] if self.arguments else None

    def full_command(self) -> str:
        """Quoted command line used in log lines and error messages."""
        return " ".join(quote_argument(argument) for argument in self.arguments)
