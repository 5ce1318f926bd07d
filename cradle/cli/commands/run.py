"""Run command: execute a job file."""

import logging
from argparse import Namespace
from pathlib import Path

from cradle.exceptions import JobValidationError
from cradle.inputs import build_config
from cradle.loader import JobLoader
from .common import configure_logging, execute


logger = logging.getLogger(__name__)


def run_job(args: Namespace) -> int:
    """Load, validate and run a job file."""
    configure_logging(args)

    job_path = Path(args.job).resolve()
    if not job_path.exists():
        logger.error(f"Job file not found: {job_path}")
        return 1

    logger.info(f"Loading job: {job_path}")
    try:
        job = JobLoader().load(job_path)
    except JobValidationError as e:
        for error in e.errors:
            logger.error(f"Validation error: {error.message}")
        return e.exit_code

    if args.dry_run:
        logger.info("[DRY RUN] Job validation successful")
        return 0

    config = build_config(*job.inputs())
    logger.info(f"Running: {config.full_command()}")
    return execute(config, job.output)
