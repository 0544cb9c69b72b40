"""
MatchMonitor - Tails the game log and notifies when a match starts.

Wires the change signal source, incremental reader, status matcher and
notification dispatcher into one asyncio loop:

    wait for change signal -> drain new lines -> match -> notify -> repeat
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import BinaryIO

from .errors import NotificationError, SignalSourceError
from .monitoring.change_signal import ChangeSignalSource
from .monitoring.cursor_store import CursorStore
from .monitoring.log_reader import IncrementalLogReader
from .monitoring.models import MonitorState, WatchTarget
from .monitoring.status_matcher import StatusMatcher
from .notifier import NotificationDispatcher


class MatchMonitor:
    """
    Monitors a single log file for the match-starting status line.

    The cursor and file handle are owned by this object and only touched from
    the task running ``run()``.
    """

    def __init__(
        self,
        target: WatchTarget,
        dispatcher: NotificationDispatcher | None = None,
        signal_source: ChangeSignalSource | None = None,
        matcher: StatusMatcher | None = None,
        reader: IncrementalLogReader | None = None,
        force_polling: bool = False,
    ):
        """
        Initialize the match monitor.

        Args:
            target: Log file path and poll interval
            dispatcher: Sends the match notification (default: desktop notifications)
            signal_source: Wakeup source (default: watchdog observer on the log directory)
            matcher: Status line matcher (default: literal window match only)
            reader: Incremental line reader
            force_polling: Use the polling observer for the default signal source
        """
        self.target = target
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.signal_source = signal_source or ChangeSignalSource(target, force_polling=force_polling)
        self.matcher = matcher or StatusMatcher()
        self.reader = reader or IncrementalLogReader()

        self.cursor_store = CursorStore()
        self.state = MonitorState.INITIALIZING
        self.match_count = 0

        self._handle: BinaryIO | None = None
        self._file_id: tuple[int, int] | None = None
        self._running = False
        self._logger = logging.getLogger(__name__)

    # ============================================================================
    # Lifecycle Methods
    # ============================================================================

    async def initialize(self) -> None:
        """
        Open the log, place the cursor at end-of-file and start the signal source.

        Raises:
            OSError: If the log file cannot be opened
            SignalSourceError: If the file watch cannot be registered
        """
        self.state = MonitorState.INITIALIZING
        self._open_handle()
        end = self.cursor_store.initialize_at_end(self._handle)
        self._logger.debug(f"Skipping {end} bytes of existing log history")

        try:
            await self.signal_source.start()
        except SignalSourceError:
            self._shutdown()
            raise
        self._running = True
        self.state = MonitorState.LISTENING
        self._logger.info("Listening to events")

    async def run(self) -> None:
        """
        Main monitoring loop.

        Runs until ``stop()`` is called, the task is cancelled, or the signal
        source fails.

        Raises:
            OSError: If initialization cannot open the log file
            SignalSourceError: If the signal source fails
        """
        if self.state is not MonitorState.LISTENING:
            await self.initialize()

        try:
            while self._running:
                signal = await self.signal_source.wait()
                self._logger.debug(f"Received file event: {signal.source.value} ({signal.raw_kind})")
                await self.drain_once()
        except asyncio.CancelledError:
            self._logger.info("Monitoring loop cancelled")
        except SignalSourceError as e:
            self._logger.critical(f"Change signal source failed: {e}")
            raise
        finally:
            self._shutdown()

        self._logger.info("Monitoring loop exited")

    def stop(self) -> None:
        """Request the loop to exit after the current iteration."""
        self._running = False

    def _shutdown(self) -> None:
        self._running = False
        self.signal_source.stop()
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        self.state = MonitorState.TERMINATED

    # ============================================================================
    # Core Monitoring Methods
    # ============================================================================

    async def drain_once(self) -> int:
        """
        Read all new complete lines and dispatch a notification per match.

        Notifications run in a worker thread so a slow notification command
        does not block the event loop. Read failures and notification
        failures are logged and isolated to this iteration.

        Returns:
            Number of matching lines found in this drain
        """
        self.state = MonitorState.DRAINING
        matches = 0
        try:
            self._check_rotation()
            lines = self.reader.drain(self.cursor_store.cursor, self._handle)
        except OSError as e:
            self._logger.error(f"Error reading {self.target.path}: {e}")
            self.state = MonitorState.LISTENING
            return 0

        for line in lines:
            if not self.matcher.is_match(line):
                continue

            matches += 1
            self._logger.info(f"Match start detected at offset {line.offset}")
            try:
                await asyncio.to_thread(self.dispatcher.notify_match)
            except NotificationError as e:
                self._logger.error(f"Failed to send match notification: {e}")

        self.match_count += matches
        self._logger.debug(f"Read {len(lines)} lines, {matches} matched")
        self.state = MonitorState.LISTENING
        return matches

    def _check_rotation(self) -> None:
        """
        Reset the cursor if the log was truncated or replaced since the last drain.

        Raises:
            OSError: If the log path cannot be stat'ed or reopened
        """
        if self._handle is None:
            self._open_handle()
            self.cursor_store.reset()
            return

        stat = os.stat(self.target.path)
        file_id = (stat.st_dev, stat.st_ino)

        if self.reader.is_truncated(self.cursor_store.cursor, stat.st_size):
            self._logger.warning(
                f"Log file {self.target.path} was truncated "
                f"(offset {self.cursor_store.offset} > size {stat.st_size})"
            )
        elif file_id != self._file_id:
            self._logger.info(f"Log rotation detected for {self.target.path}")
        else:
            return

        self._reopen_handle()
        self.cursor_store.reset()

    def _open_handle(self) -> None:
        handle = open(Path(self.target.path), "rb")
        stat = os.fstat(handle.fileno())
        self._handle = handle
        self._file_id = (stat.st_dev, stat.st_ino)

    def _reopen_handle(self) -> None:
        old, self._handle = self._handle, None
        if old is not None:
            old.close()
        self._open_handle()
