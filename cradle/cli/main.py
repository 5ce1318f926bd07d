"""Main CLI entry point for cradle."""

import argparse
import sys
from typing import Optional

from cradle.outputs import Output
from .commands import exec_command, run_job


def _add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress non-error output'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default='warn',
        help='Set log level'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the cradle CLI."""
    parser = argparse.ArgumentParser(
        prog='cradle',
        description='Run child processes with captured or relayed output'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Exec command
    exec_parser = subparsers.add_parser('exec', help='Run a command given on the command line')
    exec_parser.add_argument(
        'argv',
        nargs=argparse.REMAINDER,
        metavar='-- PROGRAM [ARGS...]',
        help='Program and arguments to run'
    )
    exec_parser.add_argument(
        '--output',
        action='append',
        choices=[member.value for member in Output],
        help='Output to return (can be specified multiple times)'
    )
    exec_parser.add_argument(
        '--env',
        action='append',
        metavar='KEY=VALUE',
        help='Environment variable for the child (can be specified multiple times)'
    )
    exec_parser.add_argument(
        '--cwd',
        type=str,
        help='Working directory for the child'
    )
    exec_parser.add_argument(
        '--stdin',
        type=str,
        help='Text written to the child\'s stdin'
    )
    exec_parser.add_argument(
        '--log-command',
        action='store_true',
        help='Print "+ <command>" to stderr before running'
    )
    _add_logging_arguments(exec_parser)

    # Run command
    run_parser = subparsers.add_parser('run', help='Run a job file')
    run_parser.add_argument(
        'job',
        type=str,
        help='Path to job YAML file'
    )
    run_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Validate without execution'
    )
    _add_logging_arguments(run_parser)

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'exec':
        return exec_command(parsed_args)
    elif parsed_args.command == 'run':
        return run_job(parsed_args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
