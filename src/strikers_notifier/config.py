"""Configuration for the strikers notifier.

Settings come from dataclass defaults, optionally overridden by a YAML file,
then by command-line flags.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .notifier import Notification

logger = logging.getLogger(__name__)


@dataclass
class NotifierConfig:
    """Configuration for the notifier.

    Attributes:
        log_path: Game log file; located automatically when unset.
        update_frequency: Seconds between poll fallback checks (default: 5).
        debug: Enable verbose output (default: False).
        force_polling: Use stat polling instead of native filesystem events.
        structured_fallback: Also match by decoding the matchmaking JSON.
        log_dir: Directory for the JSON log and notification audit trail.
        notification_summary: Notification title.
        notification_body: Notification text.
        notification_icon: Icon name passed to the notification service.
        notification_app_name: Application name shown with the notification.
    """

    log_path: str | None = None
    update_frequency: int = 5
    debug: bool = False
    force_polling: bool = False
    structured_fallback: bool = False
    log_dir: str | None = None
    notification_summary: str = Notification.summary
    notification_body: str = Notification.body
    notification_icon: str = Notification.icon
    notification_app_name: str = Notification.app_name

    def __post_init__(self) -> None:
        if isinstance(self.update_frequency, bool) or not isinstance(self.update_frequency, int):
            raise ConfigError(
                f"update_frequency must be an integer number of seconds, got {self.update_frequency!r}"
            )
        if self.update_frequency <= 0:
            raise ConfigError(f"update_frequency must be positive, got {self.update_frequency}")

        for name in _OPTIONAL_STR_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{name} must be a string path, got {value!r}")
        for name in _BOOL_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigError(f"{name} must be true or false, got {value!r}")
        for name in _STR_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ConfigError(f"{name} must be a string, got {value!r}")

    def merged(self, **overrides: Any) -> NotifierConfig:
        """Return a copy with every override that is not None applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        unknown = set(changes) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return dataclasses.replace(self, **changes)

    def notification(self) -> Notification:
        return Notification(
            summary=self.notification_summary,
            body=self.notification_body,
            icon=self.notification_icon,
            app_name=self.notification_app_name,
        )


_OPTIONAL_STR_FIELDS = ("log_path", "log_dir")
_BOOL_FIELDS = ("debug", "force_polling", "structured_fallback")
_STR_FIELDS = (
    "notification_summary",
    "notification_body",
    "notification_icon",
    "notification_app_name",
)


def load_config_file(config_path: str | Path) -> NotifierConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to a YAML mapping of ``NotifierConfig`` fields.

    Returns:
        Configuration with the file's values applied over the defaults.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the file is unreadable, the YAML is invalid, or it
            contains unknown keys or wrongly typed values
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse configuration YAML: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {config_path} must contain a mapping")

    bad_keys = [key for key in data if not isinstance(key, str)]
    if bad_keys:
        raise ConfigError(
            f"Configuration keys must be strings, got {', '.join(repr(k) for k in bad_keys)}"
        )

    logger.debug(f"Loaded configuration from {config_path}")
    return NotifierConfig().merged(**data)
