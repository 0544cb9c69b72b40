"""Log tailing core for the strikers notifier.

This package provides incremental reading of a single log file, change
signalling and detection of the matchmaking status line.

Key Components:
    - models: Cursor, line, signal and target value types
    - cursor_store: In-memory read cursor, initialized at end-of-file
    - log_reader: Incremental reader that holds back partial lines
    - status_matcher: Fixed-window match of the StartingGame payload
    - change_signal: Filesystem events and poll ticks as one wakeup stream

Example:
    >>> from strikers_notifier.monitoring import (
    ...     CursorStore,
    ...     IncrementalLogReader,
    ...     StatusMatcher,
    ... )
    >>> store = CursorStore()
    >>> reader = IncrementalLogReader()
    >>> with open("/path/to/OmegaStrikers.log", "rb") as f:
    ...     store.initialize_at_end(f)
    ...     lines = reader.drain(store.cursor, f)
"""

from __future__ import annotations

from .change_signal import ChangeSignalSource
from .cursor_store import CursorStore
from .log_reader import IncrementalLogReader
from .models import ChangeSignal, LogLine, MonitorState, ReadCursor, SignalSource, WatchTarget
from .status_matcher import StatusMatcher

__all__ = [
    "ChangeSignal",
    "ChangeSignalSource",
    "CursorStore",
    "IncrementalLogReader",
    "LogLine",
    "MonitorState",
    "ReadCursor",
    "SignalSource",
    "StatusMatcher",
    "WatchTarget",
]
