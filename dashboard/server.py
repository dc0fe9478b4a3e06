"""Flask dashboard server for slate.

Read-only: serves today's tasks and the day-grouped history straight from the
persisted task blob. The desktop app stays the only writer.
"""

import argparse
import logging
import os
from datetime import datetime
from typing import Callable

from flask import Flask, jsonify, render_template

from config import SLATE_DIR, LOG_DIR, TASKS_KEY, DASHBOARD_PORT, DASHBOARD_PID_FILE
from logging_setup import setup_logging
from models import Task
from storage import FileBlobStore, TaskRepository
import views

logger = logging.getLogger(__name__)


def _format_task_for_api(t: Task) -> dict:
    """Format a task for the API response."""
    return {
        "id": t.id,
        "name": t.name,
        "status": t.status.value,
        "is_timed": t.is_timed,
        "elapsed_seconds": t.elapsed,
        "duration_seconds": t.duration,
        "elapsed_display": views.format_time(t.elapsed),
        "caption": views.task_caption(t),
        "progress": round(views.progress(t), 3),
        "created_at": t.creation_date.isoformat(),
    }


def create_app(repository: TaskRepository,
               clock: Callable[[], datetime] = datetime.now) -> Flask:
    """Build the dashboard app over a task repository."""
    app = Flask(__name__)

    @app.route("/")
    def index():
        """Serve the dashboard HTML."""
        return render_template("index.html", date_str=clock().date().isoformat())

    @app.route("/api/today")
    def api_today():
        """Return today's tasks, active first."""
        now = clock()
        tasks = views.today_tasks(repository.load(), now)
        return jsonify({
            "date": now.date().isoformat(),
            "running": views.running_count(tasks),
            "completed": views.completed_count(tasks),
            "footer": views.footer_text(tasks),
            "tasks": [_format_task_for_api(t) for t in tasks],
        })

    @app.route("/api/history")
    def api_history():
        """Return every task grouped by creation day, newest day first."""
        now = clock()
        days = []
        for day, tasks in views.history(repository.load()):
            days.append({
                "date": day.date().isoformat(),
                "label": views.format_date_header(day, now),
                "total_elapsed_seconds": sum(t.elapsed for t in tasks),
                "tasks": [_format_task_for_api(t) for t in tasks],
            })
        return jsonify({"days": days})

    return app


def main():
    parser = argparse.ArgumentParser(description="slate dashboard server")
    parser.add_argument("--port", type=int, default=DASHBOARD_PORT)
    args = parser.parse_args()

    setup_logging(log_dir=LOG_DIR, filename="dashboard.log")

    repository = TaskRepository(FileBlobStore(SLATE_DIR), TASKS_KEY)
    app = create_app(repository)

    # Write PID file
    DASHBOARD_PID_FILE.parent.mkdir(parents=True, exist_ok=True)
    DASHBOARD_PID_FILE.write_text(str(os.getpid()))
    logger.info("Dashboard serving %s on port %d", SLATE_DIR, args.port)

    try:
        app.run(host="127.0.0.1", port=args.port, debug=False)
    finally:
        DASHBOARD_PID_FILE.unlink(missing_ok=True)


if __name__ == "__main__":
    main()
