"""Tray menu listing today's tasks."""

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import QMenu

from config import EMPTY_TODAY_TEXT
from models import TaskStatus
import views


class TrayMenu(QObject):
    """Builds the tray icon's menu from the task store.

    The menu is rebuilt just before it opens and whenever the store changes
    while it is closed.
    """

    new_task_requested = pyqtSignal()
    history_requested = pyqtSignal()
    quit_requested = pyqtSignal()

    def __init__(self, store, parent=None):
        super().__init__(parent)
        self.store = store
        self.menu = QMenu()
        self.task_menus = {}
        self.menu.aboutToShow.connect(self.rebuild)
        self.store.changed.connect(self._on_store_changed)
        self.rebuild()

    def _on_store_changed(self):
        if not self.menu.isVisible():
            self.rebuild()

    def rebuild(self):
        """Recreate every menu entry from current task state."""
        self.menu.clear()
        for submenu in self.task_menus.values():
            submenu.deleteLater()
        self.task_menus = {}

        new_action = self.menu.addAction("New task…")
        new_action.triggered.connect(self.new_task_requested.emit)
        self.menu.addSeparator()

        tasks = self.store.today_tasks()
        if not tasks:
            empty = self.menu.addAction(EMPTY_TODAY_TEXT)
            empty.setEnabled(False)

        for task in tasks:
            self._add_task_entry(task)

        self.menu.addSeparator()
        footer = self.menu.addAction(views.footer_text(tasks))
        footer.setEnabled(False)

        history_action = self.menu.addAction("Open history")
        history_action.triggered.connect(self.history_requested.emit)
        quit_action = self.menu.addAction("Quit")
        quit_action.triggered.connect(self.quit_requested.emit)

    def _add_task_entry(self, task):
        title = f"{task.name}  {views.task_caption(task)}"

        if task.status == TaskStatus.COMPLETED:
            done = self.menu.addAction(f"✓ {title}")
            done.setEnabled(False)
            return

        prefix = "▶" if task.status == TaskStatus.RUNNING else "⏸"
        submenu = self.menu.addMenu(f"{prefix} {title}")
        self.task_menus[task.id] = submenu

        toggle_label = "Pause" if task.status == TaskStatus.RUNNING else "Resume"
        toggle = submenu.addAction(toggle_label)
        toggle.triggered.connect(lambda _=False, tid=task.id: self.store.toggle_pause(tid))

        stop = submenu.addAction("Stop")
        stop.triggered.connect(lambda _=False, tid=task.id: self.store.stop_task(tid))
