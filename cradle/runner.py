"""
Entry points for running child processes.

    >>> from cradle import cmd, Output, Split
    >>> cmd(Split("echo foo"), output=Output.STDOUT_TRIMMED)
    'foo'

cmd() raises CradleError on failure; cmd_result() returns the error as a
value instead. Both run the child in exactly the same way.
"""

from typing import Any, Optional, Tuple

from .config import Config
from .context import Context
from .exceptions import CradleError
from .exec.launcher import ProcessLauncher
from .exec.relay import RelayEngine
from .inputs import build_config
from .outputs import Output, Shape, assemble, configure_output


def run_cmd(context: Context, config: Config, output: Shape = Output.UNIT) -> Any:
    """
    Spawn, relay, wait and assemble a single invocation.

    Args:
        context: Sinks and inherited environment for the child
        config: Execution config built from the caller's inputs
        output: Requested result shape

    Returns:
        The typed value for output

    Raises:
        CradleError: any failure, see cradle.exceptions
    """
    config = configure_output(output, config)
    spawned = ProcessLauncher(context).spawn(config)
    result = RelayEngine(context, config).run(spawned)
    return assemble(output, config, result)


def cmd(*inputs: Any, output: Shape = Output.UNIT, context: Optional[Context] = None) -> Any:
    """Run a child process and return the requested output, raising CradleError on failure."""
    if context is None:
        context = Context.production()
    return run_cmd(context, build_config(*inputs), output)


def cmd_result(
    *inputs: Any,
    output: Shape = Output.UNIT,
    context: Optional[Context] = None,
) -> Tuple[Any, Optional[CradleError]]:
    """
    Like cmd(), but return errors instead of raising them.

    Returns:
        Tuple of (value, error) - error is None if successful, value is None
        if not
    """
    try:
        return cmd(*inputs, output=output, context=context), None
    except CradleError as e:
        return None, e


def cmd_unit(*inputs: Any, context: Optional[Context] = None) -> None:
    """Run a child process for its side effects only."""
    cmd(*inputs, output=Output.UNIT, context=context)
