"""Change signals for the watched log file.

Filesystem events from a watchdog observer and a poll timeout are merged into
a single stream of ``ChangeSignal`` wakeups. The observer thread is the only
producer and the match monitor task the only consumer.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from ..errors import SignalSourceError
from .models import ChangeSignal, SignalSource, WatchTarget

logger = logging.getLogger(__name__)


class LogFileEventHandler(FileSystemEventHandler):
    """Forwards events that touch the target log file.

    The parent directory is watched so that a replaced (rotated) file keeps
    producing events; events for sibling files are ignored.
    """

    def __init__(self, target_file: Path, callback):
        """Initialize event handler.

        Args:
            target_file: The log file to watch.
            callback: Called with the watchdog event type for relevant events.
        """
        self.target_file = os.path.abspath(target_file)
        self.callback = callback

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return

        paths = [event.src_path, getattr(event, "dest_path", "")]
        if any(p and os.path.abspath(os.fsdecode(p)) == self.target_file for p in paths):
            self.callback(event.event_type)


class ChangeSignalSource:
    """Single wakeup channel over filesystem events and poll ticks.

    Attributes:
        target: The watched file and its poll interval.
        force_polling: Use watchdog's stat-based polling observer instead of
            the native platform API.
    """

    def __init__(self, target: WatchTarget, force_polling: bool = False):
        """Initialize change signal source.

        Args:
            target: The file to watch.
            force_polling: Use the polling observer, e.g. on network shares
                or Proton prefixes where native events are not delivered.
        """
        self.target = target
        self.force_polling = force_polling

        self._observer = None
        self._queue: asyncio.Queue[ChangeSignal] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    async def start(self) -> None:
        """Start the observer thread.

        Raises:
            SignalSourceError: If the watch cannot be registered.
        """
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()

        if self.force_polling:
            observer = PollingObserver(timeout=self.target.poll_interval)
        else:
            observer = Observer()

        handler = LogFileEventHandler(self.target.path, self._on_file_event)
        watch_dir = str(Path(self.target.path).parent)
        try:
            observer.schedule(handler, watch_dir, recursive=False)
            observer.start()
        except OSError as e:
            raise SignalSourceError(f"Failed to watch {watch_dir}: {e}") from e

        self._observer = observer
        logger.info(
            f"Watching {self.target.path} with {type(observer).__name__} "
            f"(poll interval {self.target.poll_interval}s)"
        )

    def _on_file_event(self, kind: str) -> None:
        # Runs on the observer thread
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        signal = ChangeSignal(source=SignalSource.FILESYSTEM_EVENT, raw_kind=kind)
        try:
            loop.call_soon_threadsafe(self._queue.put_nowait, signal)
        except RuntimeError:
            logger.debug(f"Dropped {kind} event after event loop shutdown")

    async def wait(self) -> ChangeSignal:
        """Wait for the next filesystem event or the poll interval to elapse.

        Bursts of queued events are coalesced into the first one, since any
        wakeup drains everything new.

        Raises:
            SignalSourceError: If the observer thread has died.
        """
        if self._queue is None:
            raise RuntimeError("ChangeSignalSource.start() must be called before wait()")

        self._check_observer()
        try:
            signal = await asyncio.wait_for(self._queue.get(), timeout=self.target.poll_interval)
        except asyncio.TimeoutError:
            self._check_observer()
            return ChangeSignal(source=SignalSource.POLL_TICK, raw_kind="timeout")

        coalesced = 0
        while not self._queue.empty():
            self._queue.get_nowait()
            coalesced += 1
        if coalesced:
            logger.debug(f"Coalesced {coalesced} additional file events")
        return signal

    def _check_observer(self) -> None:
        if self._observer is not None and not self._observer.is_alive():
            raise SignalSourceError("File observer thread stopped unexpectedly")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the observer thread."""
        observer, self._observer = self._observer, None
        if observer is None:
            return

        observer.stop()
        observer.join(timeout)
        if observer.is_alive():
            logger.warning("File observer did not stop within timeout")
        logger.info("Stopped watching log file")
