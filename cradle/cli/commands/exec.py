"""Exec command: run a program given on the command line."""

import logging
from argparse import Namespace
from typing import Any, List

from cradle.inputs import CurrentDir, LogCommand, SetVar, Stdin, build_config
from cradle.outputs import Output
from .common import configure_logging, execute


logger = logging.getLogger(__name__)


def parse_env(items: List[str]) -> List[SetVar]:
    """Parse KEY=VALUE pairs into SetVar inputs."""
    variables = []
    for item in items or []:
        if '=' not in item:
            raise ValueError(f"Invalid env format: {item}. Expected KEY=VALUE")
        key, value = item.split('=', 1)
        variables.append(SetVar(key, value))
    return variables


def exec_command(args: Namespace) -> int:
    """
    Run the program in args.argv.

    Without --output both streams are relayed and the child's exit code
    becomes ours. With --output the requested values are printed.
    """
    configure_logging(args)

    argv = list(args.argv)
    if argv and argv[0] == '--':
        argv = argv[1:]

    try:
        inputs: List[Any] = []
        if args.log_command:
            inputs.append(LogCommand())
        inputs.append(argv)
        inputs.extend(parse_env(args.env))
        if args.cwd:
            inputs.append(CurrentDir(args.cwd))
        if args.stdin is not None:
            inputs.append(Stdin(args.stdin))
    except ValueError as e:
        logger.error(f"Validation error: {e}")
        return 2

    config = build_config(*inputs)

    if not args.output:
        return execute(config, Output.STATUS, print_values=False)

    outputs = [Output(name) for name in args.output]
    shape = outputs[0] if len(outputs) == 1 else tuple(outputs)
    return execute(config, shape)
