"""Desktop notifications when an Omega Strikers match starts.

Tails the game client's log file and notifies once per "StartingGame"
matchmaking status line.
"""

__version__ = "0.1.0"
