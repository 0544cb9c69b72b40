"""Incremental log reading with partial-line safety.

This module reads only the complete lines appended to a log file since the
last read, using a byte offset cursor. A trailing line without its newline is
left in place and read again once the writer finishes it.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from .models import LogLine, ReadCursor

logger = logging.getLogger(__name__)

LINE_TERMINATOR = b"\n"


class IncrementalLogReader:
    """Reads newly appended complete lines from an open log file.

    The reader holds no position of its own; the caller passes the cursor in
    and the reader advances it past the last terminated line before
    returning.
    """

    def drain(self, cursor: ReadCursor, handle: BinaryIO) -> list[LogLine]:
        """Read every complete line available after ``cursor``.

        Args:
            cursor: Read cursor, advanced in place on success.
            handle: Readable binary handle to the log file.

        Returns:
            Lines in file order, without terminators. Empty when nothing new
            was fully written.

        Raises:
            OSError: If seeking or reading fails. The cursor is left
                unchanged so the same bytes are read again next time.
        """
        offset = cursor.byte_offset
        handle.seek(offset)

        lines: list[LogLine] = []
        while True:
            chunk = handle.readline()
            if not chunk:  # EOF
                break
            if not chunk.endswith(LINE_TERMINATOR):
                # Writer is mid-line; leave the fragment for the next drain
                logger.debug(
                    f"Holding back {len(chunk)} byte partial line at offset {offset}"
                )
                break

            lines.append(LogLine(raw=_strip_terminator(chunk), offset=offset))
            offset += len(chunk)

        if lines:
            logger.debug(
                f"Read {len(lines)} new lines (offset {cursor.byte_offset} -> {offset})"
            )
            cursor.advance_to(offset)

        return lines

    @staticmethod
    def is_truncated(cursor: ReadCursor, file_size: int) -> bool:
        """Return True if the file shrank below the cursor.

        A shrunken file means the cursor points past end-of-file and must be
        reset rather than treated as "no new lines".
        """
        return file_size < cursor.byte_offset


def _strip_terminator(chunk: bytes) -> bytes:
    line = chunk[:-1]
    if line.endswith(b"\r"):
        line = line[:-1]
    return line
