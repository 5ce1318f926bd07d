"""
cradle: run child processes from Python.

    from cradle import cmd, Output, Split

    stdout = cmd(Split("echo foo"), output=Output.STDOUT_TRIMMED)
    status = cmd("false", output=Output.STATUS)

Inputs configure the invocation, the output shape selects what is captured
and returned, and errors are raised as CradleError subclasses (or returned
by cmd_result()).
"""

from .config import Config
from .context import Context, MemorySink, Sink, StandardStreamSink, StreamSink
from .exceptions import (
    ChildIoError,
    CradleError,
    InvalidUtf8ToStderr,
    InvalidUtf8ToStdout,
    JobValidationError,
    NoArgumentsGiven,
    NonZeroExitCode,
    ProcessSpawnFailed,
)
from .exec.result import ExitStatus, RunResult
from .inputs import CurrentDir, Input, LogCommand, SetVar, Split, Stdin
from .outputs import Output
from .runner import cmd, cmd_result, cmd_unit, run_cmd

__all__ = [
    "cmd",
    "cmd_result",
    "cmd_unit",
    "run_cmd",
    "Config",
    "Context",
    "Sink",
    "StandardStreamSink",
    "StreamSink",
    "MemorySink",
    "Input",
    "Split",
    "SetVar",
    "CurrentDir",
    "Stdin",
    "LogCommand",
    "Output",
    "ExitStatus",
    "RunResult",
    "CradleError",
    "NoArgumentsGiven",
    "ProcessSpawnFailed",
    "ChildIoError",
    "NonZeroExitCode",
    "InvalidUtf8ToStdout",
    "InvalidUtf8ToStderr",
    "JobValidationError",
]
