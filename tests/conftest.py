"""Fixtures shared by the cradle test suite."""

import sys
from pathlib import Path

import pytest

from cradle import Context


HELPER_SCRIPT = Path(__file__).parent / "helper.py"


@pytest.fixture
def helper():
    """Command prefix running the test helper child process."""
    return [sys.executable, str(HELPER_SCRIPT)]


@pytest.fixture
def context():
    """Context relaying into memory."""
    return Context.test()
