# conftest.py
import logging

import pytest

from analysis.clock import ManualClock


def pytest_configure(config):
    # trace lines and lock events are logged at DEBUG; keep them visible
    # in failure reports without flooding passing runs
    logging.getLogger("analysis").setLevel(logging.DEBUG)


@pytest.fixture
def manual_clock():
    """Millisecond clock that only moves on advance()."""
    return ManualClock()
