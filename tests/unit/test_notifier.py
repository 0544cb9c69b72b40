"""Unit tests for notifier.py - desktop notification dispatch."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from strikers_notifier.errors import NotificationError
from strikers_notifier.notifier import (
    DesktopNotificationBackend,
    Notification,
    NotificationDispatcher,
)


class TestNotification:
    def test_defaults(self):
        notification = Notification()

        assert notification.summary == "Match Found!"
        assert notification.body == "KO Them!"
        assert notification.icon == "steam_icon_1869590"
        assert notification.app_name == "Omega Strikers Notifier"


class TestDesktopNotificationBackend:
    """Test command construction and failure mapping."""

    def test_linux_command(self):
        cmd = DesktopNotificationBackend(platform="linux").build_command(Notification())

        assert cmd == [
            "notify-send",
            "--app-name",
            "Omega Strikers Notifier",
            "--icon",
            "steam_icon_1869590",
            "Match Found!",
            "KO Them!",
        ]

    def test_macos_command_escapes_quotes(self):
        notification = Notification(body='Say "hi"')
        cmd = DesktopNotificationBackend(platform="darwin").build_command(notification)

        assert cmd[:2] == ["osascript", "-e"]
        assert 'display notification "Say \\"hi\\""' in cmd[2]
        assert 'with title "Omega Strikers Notifier"' in cmd[2]

    def test_windows_command(self):
        cmd = DesktopNotificationBackend(platform="win32").build_command(Notification())

        assert cmd[:4] == ["powershell", "-NoProfile", "-NonInteractive", "-Command"]
        assert "ToastText04" in cmd[4]
        assert "CreateTextNode('Match Found!')" in cmd[4]
        assert "CreateTextNode('KO Them!')" in cmd[4]
        assert "CreateToastNotifier(" in cmd[4]

    def test_windows_command_escapes_quotes(self):
        notification = Notification(body="It's on")
        cmd = DesktopNotificationBackend(platform="win32").build_command(notification)

        assert "CreateTextNode('It''s on')" in cmd[4]

    @patch("strikers_notifier.notifier.shutil.which", return_value=r"C:\Windows\powershell.exe")
    @patch("strikers_notifier.notifier.subprocess.run")
    def test_show_runs_windows_command(self, mock_run, _mock_which):
        mock_run.return_value = MagicMock(returncode=0, stderr="")

        DesktopNotificationBackend(platform="win32").show(Notification())

        assert mock_run.call_args.args[0][0] == "powershell"

    def test_unsupported_platform(self):
        with pytest.raises(NotificationError, match="not supported"):
            DesktopNotificationBackend(platform="sunos5").build_command(Notification())

    @patch("strikers_notifier.notifier.shutil.which", return_value="/usr/bin/notify-send")
    @patch("strikers_notifier.notifier.subprocess.run")
    def test_show_runs_command(self, mock_run, _mock_which):
        mock_run.return_value = MagicMock(returncode=0, stderr="")

        DesktopNotificationBackend(platform="linux").show(Notification())

        cmd = mock_run.call_args.args[0]
        assert cmd[0] == "notify-send"
        assert mock_run.call_args.kwargs["check"] is False

    @patch("strikers_notifier.notifier.shutil.which", return_value=None)
    def test_show_missing_binary(self, _mock_which):
        with pytest.raises(NotificationError, match="not found"):
            DesktopNotificationBackend(platform="linux").show(Notification())

    @patch("strikers_notifier.notifier.shutil.which", return_value="/usr/bin/notify-send")
    @patch("strikers_notifier.notifier.subprocess.run")
    def test_show_nonzero_exit(self, mock_run, _mock_which):
        mock_run.return_value = MagicMock(returncode=1, stderr="no dbus session\n")

        with pytest.raises(NotificationError, match="no dbus session"):
            DesktopNotificationBackend(platform="linux").show(Notification())

    @patch("strikers_notifier.notifier.shutil.which", return_value="/usr/bin/notify-send")
    @patch("strikers_notifier.notifier.subprocess.run")
    def test_show_timeout(self, mock_run, _mock_which):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="notify-send", timeout=10)

        with pytest.raises(NotificationError, match="timed out"):
            DesktopNotificationBackend(platform="linux").show(Notification())


class TestNotificationDispatcher:
    """Test one dispatch per call."""

    def test_each_call_dispatches(self, recording_backend):
        dispatcher = NotificationDispatcher(backend=recording_backend)

        dispatcher.notify_match()
        dispatcher.notify_match()

        assert len(recording_backend.shown) == 2
        assert dispatcher.dispatch_count == 2

    def test_custom_notification(self, recording_backend):
        notification = Notification(summary="Go!")
        dispatcher = NotificationDispatcher(backend=recording_backend, notification=notification)

        dispatcher.notify_match()

        assert recording_backend.shown == [notification]

    def test_backend_failure_propagates(self, failing_backend):
        dispatcher = NotificationDispatcher(backend=failing_backend)

        with pytest.raises(NotificationError):
            dispatcher.notify_match()

        assert dispatcher.dispatch_count == 0
