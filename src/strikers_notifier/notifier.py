"""Desktop notifications for detected matches.

The dispatcher sends one notification per matching log line through a
backend that shells out to the host notification tool.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from dataclasses import dataclass
from typing import Protocol

from .errors import NotificationError

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("strikers_notifier.audit")

STEAM_APP_ID = 1869590


@dataclass(frozen=True)
class Notification:
    """Content of a host-level user notification."""

    summary: str = "Match Found!"
    body: str = "KO Them!"
    icon: str = f"steam_icon_{STEAM_APP_ID}"
    app_name: str = "Omega Strikers Notifier"


class NotificationBackend(Protocol):
    def show(self, notification: Notification) -> None: ...


class DesktopNotificationBackend:
    """Renders notifications with ``notify-send`` (Linux), ``osascript`` (macOS) or a
    PowerShell toast (Windows)."""

    def __init__(self, platform: str | None = None, timeout: float = 10.0):
        """Initialize desktop backend.

        Args:
            platform: Override for ``sys.platform`` (used in tests).
            timeout: Seconds to wait for the notification command.
        """
        self.platform = platform or sys.platform
        self.timeout = timeout

    def build_command(self, notification: Notification) -> list[str]:
        """Return the argv that displays ``notification`` on this platform.

        Raises:
            NotificationError: If the platform has no supported notifier.
        """
        if self.platform.startswith("linux") or "bsd" in self.platform:
            return [
                "notify-send",
                "--app-name",
                notification.app_name,
                "--icon",
                notification.icon,
                notification.summary,
                notification.body,
            ]
        if self.platform == "darwin":
            script = (
                f"display notification {_applescript_str(notification.body)} "
                f"with title {_applescript_str(notification.app_name)} "
                f"subtitle {_applescript_str(notification.summary)}"
            )
            return ["osascript", "-e", script]
        if self.platform.startswith("win"):
            return [
                "powershell",
                "-NoProfile",
                "-NonInteractive",
                "-Command",
                _windows_toast_script(notification),
            ]
        raise NotificationError(f"Desktop notifications are not supported on {self.platform}")

    def show(self, notification: Notification) -> None:
        cmd = self.build_command(notification)
        if shutil.which(cmd[0]) is None:
            raise NotificationError(f"Notification command not found: {cmd[0]}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise NotificationError(f"{cmd[0]} timed out after {self.timeout}s") from e
        except OSError as e:
            raise NotificationError(f"Failed to run {cmd[0]}: {e}") from e

        if result.returncode != 0:
            raise NotificationError(
                f"{cmd[0]} exited with status {result.returncode}: {result.stderr.strip()}"
            )


def _applescript_str(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _powershell_str(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


# Unpackaged scripts can only raise toasts under a registered AppUserModelID
WINDOWS_TOAST_APP_ID = r"{1AC14E77-02E7-4E5D-B744-2EB1AE5198B7}\WindowsPowerShell\v1.0\powershell.exe"


def _windows_toast_script(notification: Notification) -> str:
    """Build a PowerShell script that shows a three-line WinRT toast."""
    lines = (notification.summary, notification.body, notification.app_name)
    text_nodes = "; ".join(
        f"$text.Item({i}).AppendChild($template.CreateTextNode({_powershell_str(line)})) > $null"
        for i, line in enumerate(lines)
    )
    return (
        "[Windows.UI.Notifications.ToastNotificationManager, Windows.UI.Notifications, "
        "ContentType = WindowsRuntime] > $null; "
        "$template = [Windows.UI.Notifications.ToastNotificationManager]::GetTemplateContent("
        "[Windows.UI.Notifications.ToastTemplateType]::ToastText04); "
        "$text = $template.GetElementsByTagName('text'); "
        f"{text_nodes}; "
        "$toast = [Windows.UI.Notifications.ToastNotification]::new($template); "
        "[Windows.UI.Notifications.ToastNotificationManager]::CreateToastNotifier("
        f"{_powershell_str(WINDOWS_TOAST_APP_ID)}).Show($toast)"
    )


class NotificationDispatcher:
    """Forwards one notification per detected match to the backend.

    Attributes:
        backend: Renders the notification on the host.
        notification: Content sent for every match.
        dispatch_count: Number of successful dispatches so far.
    """

    def __init__(
        self,
        backend: NotificationBackend | None = None,
        notification: Notification | None = None,
    ):
        self.backend = backend or DesktopNotificationBackend()
        self.notification = notification or Notification()
        self.dispatch_count = 0

    def notify_match(self) -> None:
        """Send the match notification.

        Raises:
            NotificationError: If the backend fails to show it.
        """
        self.backend.show(self.notification)
        self.dispatch_count += 1
        logger.info(f"Match notification sent ({self.dispatch_count} this session)")
        audit_logger.info(
            "match_notification",
            extra={
                "summary": self.notification.summary,
                "dispatch_count": self.dispatch_count,
            },
        )
