"""Configuration constants for slate application."""

import os
from pathlib import Path

# Directories and files
SLATE_DIR = Path(os.environ.get("SLATE_DIR", Path.home() / ".slate"))
LOG_DIR = SLATE_DIR / "logs"
TASKS_KEY = "tasks.json"  # Blob name holding the whole task collection

# Timer constants
TIMER_INTERVAL_MS = 1000  # One tick per second
TIMER_INCREMENT_S = 1.0   # Seconds added to each running task per tick

# Task defaults
DEFAULT_TASK_MINUTES = 25
MIN_TASK_MINUTES = 0      # 0 = open-ended task
MAX_TASK_MINUTES = 480    # 8 hours

# Notifications
NOTIFICATION_TITLE = "Task Finished! 🎉"
NOTIFICATION_BODY = "The task '{name}' is complete."
NOTIFICATION_TIMEOUT_MS = 5000

# Tray
APP_NAME = "Slate"
TRAY_ICON_THEME_NAME = "view-list-details"
EMPTY_TODAY_TEXT = "A fresh slate for today."

# Dashboard
DASHBOARD_PORT = 5174
DASHBOARD_PID_FILE = SLATE_DIR / "dashboard.pid"
