"""Data models for the log tailing core.

This module defines the small value types passed between the cursor store,
the incremental reader, the status matcher and the match monitor.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class SignalSource(Enum):
    """Origin of a change signal.

    Attributes:
        FILESYSTEM_EVENT: Native filesystem notification for the watched file.
        POLL_TICK: Poll interval elapsed without any filesystem event.
    """

    FILESYSTEM_EVENT = "filesystem_event"
    POLL_TICK = "poll_tick"


class MonitorState(Enum):
    """Lifecycle states of the match monitor."""

    INITIALIZING = "initializing"
    LISTENING = "listening"
    DRAINING = "draining"
    TERMINATED = "terminated"


@dataclass
class ReadCursor:
    """Byte offset marking the end of content already handed to the matcher.

    Attributes:
        byte_offset: Number of bytes consumed from the start of the file.
    """

    byte_offset: int = 0

    def advance_to(self, offset: int) -> None:
        """Move the cursor forward to ``offset``."""
        if offset < self.byte_offset:
            raise ValueError(
                f"Cursor cannot move backwards (at {self.byte_offset}, requested {offset})"
            )
        self.byte_offset = offset

    def reset(self) -> None:
        """Rewind to the start of the file after truncation or rotation."""
        self.byte_offset = 0


@dataclass(frozen=True)
class LogLine:
    """One complete line read from the log, without its terminator.

    Attributes:
        raw: Undecoded line bytes; offsets used for matching are byte offsets.
        offset: Byte offset of the first byte of the line in the file.
    """

    raw: bytes
    offset: int

    @property
    def text(self) -> str:
        return self.raw.decode("utf-8", errors="replace")

    def __len__(self) -> int:
        return len(self.raw)


@dataclass(frozen=True)
class ChangeSignal:
    """Wakeup hint that the watched file may have changed.

    Attributes:
        source: Which mechanism produced the wakeup.
        raw_kind: Mechanism-specific description (e.g. watchdog event type).
    """

    source: SignalSource
    raw_kind: str = ""


@dataclass(frozen=True)
class WatchTarget:
    """The file being monitored and the fallback poll interval in seconds."""

    path: Path
    poll_interval: float = 5.0
