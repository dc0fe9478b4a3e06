"""Completion notifications for slate application."""

import logging
from typing import Protocol

from PyQt6.QtWidgets import QApplication, QSystemTrayIcon

from config import NOTIFICATION_TITLE, NOTIFICATION_BODY, NOTIFICATION_TIMEOUT_MS

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Receives one call per completed timed task."""

    def notify_completion(self, task_name: str) -> None:
        ...


def completion_message(task_name: str) -> tuple:
    """Title and body shown when a task finishes."""
    return NOTIFICATION_TITLE, NOTIFICATION_BODY.format(name=task_name)


class LogNotifier:
    """Writes completions to the log; used when no tray is available."""

    def notify_completion(self, task_name: str) -> None:
        title, body = completion_message(task_name)
        logger.info("%s %s", title, body)


class TrayNotifier:
    """
    Shows a desktop notification through the Qt system tray icon.

    Falls back to a plain beep on platforms whose tray cannot show messages.
    """

    def __init__(self, tray_icon):
        """
        Args:
            tray_icon: A visible QSystemTrayIcon.
        """
        self.tray_icon = tray_icon

    def notify_completion(self, task_name: str) -> None:
        title, body = completion_message(task_name)
        if QSystemTrayIcon.supportsMessages():
            self.tray_icon.showMessage(
                title,
                body,
                QSystemTrayIcon.MessageIcon.Information,
                NOTIFICATION_TIMEOUT_MS,
            )
        else:
            QApplication.beep()
        logger.info("Notified completion of '%s'", task_name)
