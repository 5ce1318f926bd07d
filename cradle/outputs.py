"""
Result shapes and the result assembler.

The caller picks what an invocation returns with an Output member or a
tuple of them. configure_output() maps that choice onto the Config flags
before the child runs; assemble() builds the typed value from the raw
result afterwards.
"""

import dataclasses
from enum import Enum
from typing import Any, Tuple, Union

from .config import Config
from .exceptions import InvalidUtf8ToStderr, InvalidUtf8ToStdout, NonZeroExitCode
from .exec.result import RunResult


class Output(str, Enum):
    """What an invocation returns."""
    UNIT = "unit"                          # None
    STDOUT_TRIMMED = "stdout_trimmed"      # str, surrounding whitespace stripped
    STDOUT_UNTRIMMED = "stdout_untrimmed"  # str, verbatim
    STDERR = "stderr"                      # str, verbatim
    STATUS = "status"                      # ExitStatus, non-zero is not an error
    SUCCESS = "success"                    # bool, non-zero is not an error


Shape = Union[Output, Tuple[Any, ...]]


def configure_output(shape: Shape, config: Config) -> Config:
    """
    Return a copy of config adjusted for the requested shape.

    Capturing a stream turns off its relay; asking for the exit status turns
    off the non-zero exit check.
    """
    if isinstance(shape, tuple):
        for component in shape:
            config = configure_output(component, config)
        return config

    shape = Output(shape)
    if shape in (Output.STDOUT_TRIMMED, Output.STDOUT_UNTRIMMED):
        return dataclasses.replace(config, capture_stdout=True, relay_stdout=False)
    elif shape == Output.STDERR:
        return dataclasses.replace(config, capture_stderr=True, relay_stderr=False)
    elif shape in (Output.STATUS, Output.SUCCESS):
        return dataclasses.replace(config, fail_on_non_zero_exit=False)
    return config


def check_exit_status(config: Config, result: RunResult) -> None:
    """Raise NonZeroExitCode if the exit policy applies and the child failed."""
    if config.fail_on_non_zero_exit and not result.exit_status.success:
        raise NonZeroExitCode(
            config.full_command(),
            result.exit_status,
            stdout=result.stdout,
            stderr=result.stderr,
        )


def assemble(shape: Shape, config: Config, result: RunResult) -> Any:
    """
    Build the typed value for shape from a raw result.

    Tuple components are extracted in declaration order, so when several
    would fail the first one decides the error.
    """
    check_exit_status(config, result)
    return _extract(shape, config, result)


def _extract(shape: Shape, config: Config, result: RunResult) -> Any:
    if isinstance(shape, tuple):
        return tuple(_extract(component, config, result) for component in shape)

    shape = Output(shape)
    if shape == Output.UNIT:
        return None
    elif shape == Output.STDOUT_UNTRIMMED:
        return _decode_stdout(config, result)
    elif shape == Output.STDOUT_TRIMMED:
        return _decode_stdout(config, result).strip()
    elif shape == Output.STDERR:
        try:
            return result.stderr.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidUtf8ToStderr(config.full_command()) from e
    elif shape == Output.STATUS:
        return result.exit_status
    elif shape == Output.SUCCESS:
        return result.exit_status.success
    else:
        raise ValueError(f"Unknown output shape: {shape}")


def _decode_stdout(config: Config, result: RunResult) -> str:
    try:
        return result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8ToStdout(config.full_command()) from e
