"""New task dialog for slate application."""

import logging

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel,
    QLineEdit, QSpinBox
)
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QFont, QKeyEvent

from config import DEFAULT_TASK_MINUTES, MIN_TASK_MINUTES, MAX_TASK_MINUTES

logger = logging.getLogger(__name__)


class TaskDialog(QDialog):
    """Dialog for creating a new task."""

    # Signal emitted when task is submitted (name, duration_seconds)
    # duration_seconds = 0 means open-ended
    task_submitted = pyqtSignal(str, int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._setup_window()
        self._setup_ui()

    def _setup_window(self):
        """Configure dialog properties."""
        self.setWindowTitle("New Task")
        self.setWindowFlags(
            Qt.WindowType.WindowStaysOnTopHint |
            Qt.WindowType.Dialog
        )
        self.setFixedWidth(350)

    def _setup_ui(self):
        """Setup UI elements."""
        layout = QVBoxLayout()
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(15)

        title = QLabel("New Task")
        title_font = QFont()
        title_font.setPointSize(16)
        title_font.setBold(True)
        title.setFont(title_font)
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title)

        # Name field
        name_layout = QHBoxLayout()
        name_label = QLabel("Name:")
        name_label.setFixedWidth(80)
        self.name_input = QLineEdit()
        self.name_input.setPlaceholderText("What are you working on?")
        name_layout.addWidget(name_label)
        name_layout.addWidget(self.name_input)
        layout.addLayout(name_layout)

        # Timer field; the minimum shows as "No timer"
        time_layout = QHBoxLayout()
        time_label = QLabel("Timer:")
        time_label.setFixedWidth(80)
        self.time_input = QSpinBox()
        self.time_input.setMinimum(MIN_TASK_MINUTES)
        self.time_input.setMaximum(MAX_TASK_MINUTES)
        self.time_input.setSpecialValueText("No timer")
        self.time_input.setValue(DEFAULT_TASK_MINUTES)
        self.time_input.setSuffix(" min")
        time_layout.addWidget(time_label)
        time_layout.addWidget(self.time_input)
        layout.addLayout(time_layout)

        instruction = QLabel("Enter to start  |  No timer = run until stopped")
        instruction.setAlignment(Qt.AlignmentFlag.AlignCenter)
        instruction.setStyleSheet("color: #666666; font-size: 11px;")
        layout.addWidget(instruction)

        self.setLayout(layout)

    def keyPressEvent(self, event: QKeyEvent):
        """Handle keyboard events."""
        key = event.key()

        if key == Qt.Key.Key_Return or key == Qt.Key.Key_Enter:
            self._submit()
        elif key == Qt.Key.Key_Escape:
            self.reject()
        else:
            super().keyPressEvent(event)

    def showEvent(self, event):
        """Focus the name field whenever the dialog opens."""
        super().showEvent(event)
        self.name_input.setFocus()
        self.name_input.selectAll()

    def _submit(self):
        """Submit the task."""
        name = self.name_input.text().strip()

        if not name:
            logger.debug("Empty task name, not submitting")
            return

        seconds = self.time_input.value() * 60
        logger.debug("TaskDialog submitting: name='%s', seconds=%d", name, seconds)
        self.task_submitted.emit(name, seconds)
        self.accept()

    def reset(self):
        """Reset dialog to default state."""
        self.name_input.clear()
        self.time_input.setValue(DEFAULT_TASK_MINUTES)
