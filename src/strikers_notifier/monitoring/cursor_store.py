"""In-memory cursor tracking for incremental log reading.

The cursor is never persisted: every process start begins at the current end
of the log so only new activity is reported.
"""

from __future__ import annotations

import logging
import os
from typing import BinaryIO

from .models import ReadCursor

logger = logging.getLogger(__name__)


class CursorStore:
    """Owns the read cursor for the single monitored log file.

    Attributes:
        cursor: The current read cursor.
    """

    def __init__(self, initial_offset: int = 0):
        """Initialize cursor store.

        Args:
            initial_offset: Starting byte offset, normally replaced by
                ``initialize_at_end`` once the file is open.
        """
        self.cursor = ReadCursor(byte_offset=initial_offset)

    @property
    def offset(self) -> int:
        return self.cursor.byte_offset

    def initialize_at_end(self, handle: BinaryIO) -> int:
        """Place the cursor at the current end of ``handle``.

        Args:
            handle: Open binary handle to the log file.

        Returns:
            The new cursor offset.
        """
        end = handle.seek(0, os.SEEK_END)
        self.cursor = ReadCursor(byte_offset=end)
        logger.debug(f"Cursor initialized at end of file (offset {end})")
        return end

    def reset(self) -> None:
        """Rewind the cursor to the start of the file."""
        previous = self.cursor.byte_offset
        self.cursor.reset()
        logger.info(f"Reset cursor from offset {previous} to 0")
