"""Detection of the matchmaking "StartingGame" status line.

The game client logs its matchmaking state as a JSON blob at a fixed position
in the line. Detection compares that byte window against a literal payload.
An opt-in structured fallback decodes the JSON instead, for log format drift.
"""

from __future__ import annotations

import json
import logging

from .models import LogLine

logger = logging.getLogger(__name__)

MATCH_WINDOW_START = 150
MATCH_WINDOW_END = 229
MATCH_PAYLOAD = (
    b'Matchmaking Status: {"state":"StartingGame","idle":{"timestamp":"","state":""},'
)

STATUS_PREFIX = "Matchmaking Status: "
STARTING_GAME_STATE = "StartingGame"

# Reported at DEBUG only; never counts as a match
LEGACY_STATE_MARKER = b'"state":"STARTING_GAME"'


class StatusMatcher:
    """Recognizes the log line announcing that a match is starting.

    Attributes:
        structured_fallback: Also accept lines whose decoded matchmaking
            status has state ``StartingGame`` when the literal window check
            fails.
    """

    def __init__(self, structured_fallback: bool = False):
        self.structured_fallback = structured_fallback

    def is_match(self, line: LogLine) -> bool:
        """Return True if ``line`` carries the StartingGame payload.

        Lines shorter than the match window never match.
        """
        raw = line.raw

        if LEGACY_STATE_MARKER in raw:
            logger.debug(
                f"Line at offset {line.offset} mentions STARTING_GAME, window: "
                f"{raw[MATCH_WINDOW_START:MATCH_WINDOW_END]!r}"
            )

        if raw[MATCH_WINDOW_START:MATCH_WINDOW_END] == MATCH_PAYLOAD:
            return True

        if self.structured_fallback:
            return self._matches_structured(line)

        return False

    def _matches_structured(self, line: LogLine) -> bool:
        text = line.text
        start = text.find(STATUS_PREFIX)
        if start < 0:
            return False

        try:
            status, _ = json.JSONDecoder().raw_decode(text, start + len(STATUS_PREFIX))
        except json.JSONDecodeError as e:
            logger.debug(f"Unparseable matchmaking status at offset {line.offset}: {e}")
            return False

        if isinstance(status, dict) and status.get("state") == STARTING_GAME_STATE:
            logger.debug(f"Structured fallback matched line at offset {line.offset}")
            return True
        return False
