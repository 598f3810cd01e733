"""
Pytest configuration and fixtures for all tests.
"""

import logging
import os
import sys

import pytest

# Add src to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

# Clear run settings that would leak into CLI defaults
for name in ('FIZZBUZZ_LIMIT', 'FIZZBUZZ_ADAPTER'):
    os.environ.pop(name, None)
os.environ.setdefault('LOG_LEVEL', 'INFO')


class RecordingHandler(logging.Handler):
    """Collects records emitted to a single logger."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def recording_logger():
    """Isolated logger plus the handler recording every line it receives."""
    logger = logging.getLogger('fizzbuzz.test')
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = RecordingHandler()
    logger.addHandler(handler)
    yield logger, handler
    logger.removeHandler(handler)


@pytest.fixture
def restore_root_logger():
    """Remove handlers installed by configure_logging after each test."""
    from logging_config import LOGGER_NAME

    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler.get_name() == LOGGER_NAME:
            root.removeHandler(handler)
    root.setLevel(level)
