#!/usr/bin/env python3
"""slate - a tray task timer with day-grouped history."""

import logging
import sys

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtGui import QDesktopServices, QIcon
from PyQt6.QtWidgets import QApplication, QStyle, QSystemTrayIcon

from config import APP_NAME, SLATE_DIR, LOG_DIR, TASKS_KEY, TRAY_ICON_THEME_NAME
from dashboard import DashboardProcess
from logging_setup import setup_logging
from notifier import LogNotifier, TrayNotifier
from storage import AsyncWriter, FileBlobStore, TaskRepository
from task_dialog import TaskDialog
from task_store import TaskStore
from timer_engine import TimerEngine
from tray import TrayMenu

logger = logging.getLogger(__name__)


class AppController(QObject):
    """Main application controller."""

    def __init__(self, app: QApplication, launch_dashboard: bool = True):
        super().__init__()
        self.app = app
        self.launch_dashboard = launch_dashboard

        self.writer = None
        self.store = None
        self.timer_engine = None
        self.tray_icon = None
        self.tray_menu = None
        self.task_dialog = None
        self.dashboard = DashboardProcess()

        self._initialize()

    def _initialize(self):
        """Initialize application components."""
        repository = TaskRepository(FileBlobStore(SLATE_DIR), TASKS_KEY)
        self.writer = AsyncWriter(repository)

        # Tray icon doubles as the notification channel
        self.tray_icon = QSystemTrayIcon(self._tray_icon_image())
        self.tray_icon.setToolTip(APP_NAME)
        if QSystemTrayIcon.isSystemTrayAvailable():
            notifier = TrayNotifier(self.tray_icon)
        else:
            logger.warning("No system tray available, completions go to the log only")
            notifier = LogNotifier()

        self.store = TaskStore(self.writer, notifier)
        self.store.load()

        self.tray_menu = TrayMenu(self.store, self)
        self.tray_menu.new_task_requested.connect(self.new_task)
        self.tray_menu.history_requested.connect(self.open_history)
        self.tray_menu.quit_requested.connect(self.app.quit)
        self.tray_icon.setContextMenu(self.tray_menu.menu)
        self.tray_icon.show()

        # Task dialog (reused for each new task)
        self.task_dialog = TaskDialog()
        self.task_dialog.task_submitted.connect(self._on_task_submitted)

        self.timer_engine = TimerEngine()
        self.timer_engine.tick.connect(self.store.on_tick)
        self.timer_engine.start()

        if self.launch_dashboard:
            self.dashboard.launch()

        self.app.aboutToQuit.connect(self.shutdown)
        logger.info("Application initialized with %d tasks", len(self.store.tasks))

    def _tray_icon_image(self) -> QIcon:
        fallback = self.app.style().standardIcon(QStyle.StandardPixmap.SP_FileDialogDetailedView)
        return QIcon.fromTheme(TRAY_ICON_THEME_NAME, fallback)

    def new_task(self):
        """Open the new task dialog."""
        self.task_dialog.reset()
        self.task_dialog.show()
        self.task_dialog.raise_()
        self.task_dialog.activateWindow()

    def _on_task_submitted(self, name: str, seconds: int):
        self.store.add_task(name, seconds)

    def open_history(self):
        """Show the history in the browser dashboard."""
        if not self.launch_dashboard:
            self.dashboard.launch()
            self.launch_dashboard = True
        QDesktopServices.openUrl(QUrl(self.dashboard.url))

    def shutdown(self):
        """Stop ticking and make sure the last snapshot reaches disk."""
        self.timer_engine.stop()
        self.writer.close()
        self.dashboard.stop()
        logger.info("Application exiting normally")


def main():
    """Main entry point."""
    setup_logging(log_dir=LOG_DIR)

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    # Tray-only app: closing the dialog must not quit
    app.setQuitOnLastWindowClosed(False)

    try:
        controller = AppController(app)
        exit_code = app.exec()
        logger.info("Application exited with code: %s", exit_code)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logger.info("Application interrupted by user (Ctrl+C)")
        sys.exit(0)


if __name__ == "__main__":
    main()
