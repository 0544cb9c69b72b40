"""Logging setup for the strikers notifier.

Console output is always human readable. When a log directory is configured,
a rotating JSON log and a JSON Lines audit trail of sent notifications are
written there as well.
"""

import json
import logging
import logging.handlers
from datetime import datetime
from pathlib import Path

PACKAGE_LOGGER = "strikers_notifier"
AUDIT_LOGGER = "strikers_notifier.audit"

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "extras", "taskName"}


def _record_extras(record: logging.LogRecord) -> dict:
    """Collect ``extra=`` fields attached to a record, made JSON safe."""
    extras = {}
    for key, value in record.__dict__.items():
        if key in _RESERVED_ATTRS:
            continue
        try:
            json.dumps(value)
            extras[key] = value
        except (TypeError, ValueError):
            extras[key] = str(value)
    return extras


class JsonLineFormatter(logging.Formatter):
    """Formats each record as one JSON object."""

    def format(self, record):
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_obj.update(_record_extras(record))
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj)


class LoggingManager:
    """Configures the package and audit loggers."""

    def __init__(self, debug: bool = False, log_dir: str | Path | None = None):
        """Initialize logging manager.

        Args:
            debug: Log DEBUG messages to the console
            log_dir: Directory for file logs; console only when None
        """
        self.log_level = logging.DEBUG if debug else logging.INFO
        self.log_dir = Path(log_dir).expanduser() if log_dir else None

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self._setup_package_logger()
        self._setup_audit_logger()

    def _setup_package_logger(self):
        """Setup package logger with console and optional file handlers."""
        logger = logging.getLogger(PACKAGE_LOGGER)
        logger.setLevel(logging.DEBUG)  # Handlers filter
        logger.propagate = False
        logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(console_handler)

        if self.log_dir is not None:
            file_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / "strikers_notifier.log",
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(JsonLineFormatter())
            logger.addHandler(file_handler)

        self.package_logger = logger

    def _setup_audit_logger(self):
        """Setup notification audit trail (JSON Lines format)."""
        logger = logging.getLogger(AUDIT_LOGGER)
        logger.setLevel(logging.INFO)
        logger.propagate = False
        logger.handlers.clear()

        if self.log_dir is None:
            logger.addHandler(logging.NullHandler())
        else:
            file_handler = logging.handlers.TimedRotatingFileHandler(
                self.log_dir / "notifications.jsonl",
                when="midnight",
                interval=1,
                backupCount=30,  # Keep 30 days
            )
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(JsonLineFormatter())
            logger.addHandler(file_handler)

        self.audit_logger = logger

    def shutdown(self):
        """Close all file handlers."""
        for logger in (self.package_logger, self.audit_logger):
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
