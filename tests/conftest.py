"""Shared fixtures for strikers_notifier tests."""

import logging
from pathlib import Path

import pytest

from strikers_notifier.errors import NotificationError
from strikers_notifier.monitoring.status_matcher import MATCH_PAYLOAD, MATCH_WINDOW_START

LOG_PREFIX = b"[2024.05.11-18.42.07:311][512]LogOmegaMatchmaking: Display: "


class RecordingBackend:
    """Notification backend that records instead of showing anything."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.shown = []

    def show(self, notification) -> None:
        if self.fail:
            raise NotificationError("notification service unavailable")
        self.shown.append(notification)


@pytest.fixture
def make_status_line():
    """Build a log line (without terminator) with a payload at the match window."""

    def _make(payload: bytes = MATCH_PAYLOAD, tail: bytes = b'"queue":{"mode":"ranked"}}') -> bytes:
        prefix = LOG_PREFIX.ljust(MATCH_WINDOW_START, b".")
        return prefix + payload + tail

    return _make


@pytest.fixture
def match_line(make_status_line) -> bytes:
    return make_status_line()


@pytest.fixture
def recording_backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def failing_backend() -> RecordingBackend:
    return RecordingBackend(fail=True)


@pytest.fixture
def empty_log_file(tmp_path: Path) -> Path:
    """Create empty log file."""
    log_file = tmp_path / "OmegaStrikers.log"
    log_file.write_bytes(b"")
    return log_file


@pytest.fixture(autouse=True)
def restore_package_loggers():
    """Undo LoggingManager configuration so caplog sees package records."""
    yield
    for name in ("strikers_notifier", "strikers_notifier.audit"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
