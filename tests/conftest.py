"""
Pytest configuration and fixtures for fanlog tests.
"""

import io

import pytest
from fanlog import DefaultLogger, Logger, reset_config
from fanlog.levels import levels


class TTYStream(io.StringIO):
    """A text stream that claims to be a terminal."""

    def isatty(self) -> bool:
        return True


class FailingStream:
    """A destination whose writes always fail."""

    def __init__(self, message: str = "disk full"):
        self.message = message
        self.calls = 0

    def write(self, data):
        self.calls += 1
        raise OSError(self.message)


@pytest.fixture(autouse=True)
def clean_config():
    """Start every test from the default configuration, levels and default logger."""
    reset_config()
    levels.reset()
    DefaultLogger.reset()
    yield
    reset_config()
    levels.reset()
    DefaultLogger.reset()


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def tty_stream():
    return TTYStream()


@pytest.fixture
def logger(stream):
    """An info-level logger writing to ``stream`` without timestamps."""
    return Logger(stream, time_format="")


@pytest.fixture
def failing_stream():
    return FailingStream()
