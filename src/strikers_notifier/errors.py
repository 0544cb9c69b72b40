"""Exception hierarchy for the strikers notifier.

I/O failures are reported with the built-in ``OSError`` family; everything
raised by this package itself derives from ``NotifierError``.
"""

from __future__ import annotations


class NotifierError(Exception):
    """Base class for all errors raised by strikers_notifier."""


class ConfigError(NotifierError):
    """Configuration file or value is invalid."""


class LocatorError(NotifierError):
    """The game log file location could not be determined."""


class NotificationError(NotifierError):
    """A desktop notification could not be dispatched."""


class SignalSourceError(NotifierError):
    """The change signal mechanism failed and can no longer deliver wakeups."""
