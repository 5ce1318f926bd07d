"""
Configurators that turn the inputs of cmd() into a Config.

Each input is applied left to right. Plain strings, bytes and paths become
single argument tokens (never split on whitespace); sequences are applied
element by element; the Input subclasses below set one field each.
"""

import os
from collections.abc import Iterable
from typing import Any, Union

from .config import Config


class Input:
    """Base class for configurators that need more than appending an argument."""

    def configure(self, config: Config) -> None:
        raise NotImplementedError


class Split(Input):
    """
    Split a string on whitespace and use the words as separate arguments.

    Split("echo foo") is the same as passing "echo", "foo".
    """

    def __init__(self, text: str):
        self.text = text

    def configure(self, config: Config) -> None:
        config.arguments.extend(self.text.split())

    def __repr__(self) -> str:
        return f"Split({self.text!r})"


class SetVar(Input):
    """Add or override an environment variable for the child process."""

    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value

    def configure(self, config: Config) -> None:
        config.environment_overrides.append((self.name, self.value))

    def __repr__(self) -> str:
        return f"SetVar({self.name!r}, {self.value!r})"


class CurrentDir(Input):
    """Run the child process in the given working directory."""

    def __init__(self, path: Union[str, "os.PathLike[str]"]):
        self.path = path

    def configure(self, config: Config) -> None:
        config.working_directory = self.path

    def __repr__(self) -> str:
        return f"CurrentDir({self.path!r})"


class Stdin(Input):
    """
    Write data to the child's stdin.

    Strings are encoded as UTF-8. Multiple Stdin inputs are concatenated in
    the order given.
    """

    def __init__(self, data: Union[str, bytes, bytearray, memoryview]):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.data = bytes(data)

    def configure(self, config: Config) -> None:
        config.stdin_payload.append(self.data)

    def __repr__(self) -> str:
        return f"Stdin({self.data!r})"


class LogCommand(Input):
    """Write '+ <command line>' to stderr before running the child."""

    def configure(self, config: Config) -> None:
        config.log_invocation = True

    def __repr__(self) -> str:
        return "LogCommand()"


def configure_input(value: Any, config: Config) -> None:
    """Apply a single cmd() input to config."""
    if isinstance(value, Input):
        value.configure(config)
    elif isinstance(value, type) and issubclass(value, Input):
        # Allows passing LogCommand without instantiating it
        value().configure(config)
    elif isinstance(value, (str, bytes)):
        config.arguments.append(value)
    elif isinstance(value, os.PathLike):
        config.arguments.append(os.fspath(value))
    elif isinstance(value, Iterable):
        for item in value:
            configure_input(item, config)
    else:
        raise TypeError(f"Unsupported cmd() input of type {type(value).__name__}: {value!r}")


def build_config(*inputs: Any) -> Config:
    """Build a fresh Config from cmd() inputs."""
    config = Config()
    for value in inputs:
        configure_input(value, config)
    return config
