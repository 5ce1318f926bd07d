"""Helpers shared by the CLI commands."""

import logging
import sys
from argparse import Namespace
from typing import Any, List, Optional

from cradle.config import Config
from cradle.context import Context
from cradle.exceptions import CradleError, NonZeroExitCode
from cradle.exec.result import ExitStatus
from cradle.outputs import Shape
from cradle.runner import run_cmd


logger = logging.getLogger(__name__)


def configure_logging(args: Namespace) -> None:
    """Set up logging from --log-level, --debug, --quiet and --verbose."""
    level_name = 'warning' if args.log_level == 'warn' else args.log_level
    log_level = getattr(logging, level_name.upper())
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR
    elif args.verbose:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def status_code(status: ExitStatus) -> int:
    """Shell-style exit code: 128 + signal number for killed children."""
    return status.code if status.code is not None else 128 + status.signal


def format_value(value: Any) -> List[str]:
    """Render an output value as printable lines."""
    if value is None:
        return []
    if isinstance(value, tuple):
        lines: List[str] = []
        for item in value:
            lines.extend(format_value(item))
        return lines
    if isinstance(value, bool):
        return ['true' if value else 'false']
    if isinstance(value, ExitStatus):
        return [str(status_code(value))]
    return [value]


def exit_code_for(value: Any) -> int:
    """Use the child's exit status as ours when the caller asked for it."""
    if isinstance(value, ExitStatus):
        return status_code(value)
    if isinstance(value, tuple):
        for item in value:
            if isinstance(item, ExitStatus):
                return exit_code_for(item)
    return 0


def execute(
    config: Config,
    output: Shape,
    context: Optional[Context] = None,
    print_values: bool = True,
) -> int:
    """
    Run config and print the requested outputs to stdout.

    Args:
        config: Execution config
        output: Requested result shape
        context: Relay context (default: the real terminal)
        print_values: Print captured values to stdout

    Returns:
        Process exit code for the CLI
    """
    context = context or Context.production()
    try:
        value = run_cmd(context, config, output)
    except NonZeroExitCode as e:
        logger.error(str(e))
        return status_code(e.exit_status)
    except CradleError as e:
        logger.error(str(e))
        return 1

    lines = format_value(value) if print_values else []
    for line in lines:
        # Untrimmed stdout and stderr usually carry their own newline
        sys.stdout.write(line if line.endswith("\n") else line + "\n")
    sys.stdout.flush()

    return exit_code_for(value)
