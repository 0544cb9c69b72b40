"""Shared fixtures for monitoring tests."""

from pathlib import Path

import pytest

from strikers_notifier.monitoring.log_reader import IncrementalLogReader
from strikers_notifier.monitoring.models import ReadCursor


@pytest.fixture
def temp_log_file(tmp_path: Path) -> Path:
    """Create temporary log file with initial content."""
    log_file = tmp_path / "test.log"
    log_file.write_bytes(b"Line 1\nLine 2\nLine 3\n")
    return log_file


@pytest.fixture
def reader() -> IncrementalLogReader:
    return IncrementalLogReader()


@pytest.fixture
def cursor() -> ReadCursor:
    return ReadCursor()
