"""Task store: owns every task and applies the timer state machine."""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from config import TIMER_INCREMENT_S
from models import Task, TaskStatus
from storage import PersistenceError
import views

logger = logging.getLogger(__name__)


class TaskStore(QObject):
    """
    In-memory, newest-first task collection.

    Every mutation is followed by a full save through the repository.
    Save failures are logged and never roll back in-memory state.
    Unknown ids and empty names are silent no-ops.
    """

    # Emitted after any mutation
    changed = pyqtSignal()
    # Emitted once per completion event (task_id, task_name)
    task_completed = pyqtSignal(str, str)

    def __init__(self, repository, notifier=None,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Initialize task store.

        Args:
            repository: Object with load() -> List[Task] and save(List[Task]).
            notifier: Object with notify_completion(task_name), or None.
            clock: Returns the current local time; stamps new tasks.
        """
        super().__init__()
        self.repository = repository
        self.notifier = notifier
        self.clock = clock
        self._tasks: List[Task] = []

    @property
    def tasks(self) -> List[Task]:
        """Copy of the collection, newest first."""
        return list(self._tasks)

    def load(self) -> None:
        """Replace the collection with whatever the repository holds."""
        self._tasks = self.repository.load()
        logger.info("Loaded %d tasks", len(self._tasks))
        self.changed.emit()

    def get(self, task_id: str) -> Optional[Task]:
        return next((t for t in self._tasks if t.id == task_id), None)

    def add_task(self, name: str, duration: float = 0.0) -> Optional[Task]:
        """
        Create a running task at the head of the collection.

        Args:
            name: Display name; whitespace-only names are rejected.
            duration: Target seconds, 0 (or less) for an open-ended task.

        Returns:
            The new task, or None if the name was empty.
        """
        if not name or not name.strip():
            logger.debug("Empty task name, not creating task")
            return None

        duration = max(0.0, float(duration))
        task = Task(
            id="",  # Will be auto-generated
            name=name,
            duration=duration,
            creation_date=self.clock(),
        )
        self._tasks.insert(0, task)
        logger.info("Created task '%s' (%s)", task.name,
                    f"{duration:.0f}s" if task.is_timed else "open-ended")

        self._commit()
        return task

    def toggle_pause(self, task_id: str) -> bool:
        """
        Pause a running task or resume a paused one.

        Returns:
            True if the status changed.
        """
        task = self.get(task_id)
        if task is None:
            logger.debug("toggle_pause: unknown task %s", task_id)
            return False

        if not task.toggle_pause():
            return False

        logger.info("%s task '%s'",
                    "Resumed" if task.status == TaskStatus.RUNNING else "Paused",
                    task.name)
        self._commit()
        return True

    def stop_task(self, task_id: str) -> bool:
        """
        Force a task to COMPLETED without touching its elapsed time.

        A timed task that has already reached its duration counts as a
        completion and is notified. Stopping a completed task does nothing.

        Returns:
            True if the status changed.
        """
        task = self.get(task_id)
        if task is None:
            logger.debug("stop_task: unknown task %s", task_id)
            return False

        if task.is_completed:
            return False

        task.status = TaskStatus.COMPLETED
        logger.info("Stopped task '%s' at %.0fs", task.name, task.elapsed)

        if task.is_timed and task.elapsed >= task.duration:
            self._on_completed(task)

        self._commit()
        return True

    def on_tick(self, interval: float = TIMER_INCREMENT_S) -> None:
        """
        Advance every running task by one tick.

        Saves only if at least one task was running.
        """
        completed = []
        did_change = False
        for task in self._tasks:
            if task.status != TaskStatus.RUNNING:
                continue
            did_change = True
            if task.advance(interval):
                completed.append(task)

        for task in completed:
            logger.info("Task '%s' reached %.0fs", task.name, task.duration)
            self._on_completed(task)

        if did_change:
            self._commit()

    def today_tasks(self, now: Optional[datetime] = None) -> List[Task]:
        return views.today_tasks(self._tasks, now or self.clock())

    def tasks_by_date(self):
        return views.tasks_by_date(self._tasks)

    def running_count(self, now: Optional[datetime] = None) -> int:
        return views.running_count(self.today_tasks(now))

    def completed_count(self, now: Optional[datetime] = None) -> int:
        return views.completed_count(self.today_tasks(now))

    def _on_completed(self, task: Task) -> None:
        """Fire the completion event; notifier trouble never reaches the caller."""
        self.task_completed.emit(task.id, task.name)
        if self.notifier is None:
            return
        try:
            self.notifier.notify_completion(task.name)
        except Exception:
            logger.warning("Failed to notify completion of '%s'", task.name, exc_info=True)

    def _commit(self) -> None:
        """Persist the whole collection and tell observers."""
        try:
            self.repository.save(self._tasks)
        except PersistenceError as e:
            logger.error("%s", e)
        self.changed.emit()
