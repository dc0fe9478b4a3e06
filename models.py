"""Data models for slate application."""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Optional
import math
import uuid


class TaskStatus(str, Enum):
    """Task lifecycle states."""
    RUNNING = "running"      # Timer accruing
    PAUSED = "paused"        # Timer stopped, can resume
    COMPLETED = "completed"  # Terminal


@dataclass
class Task:
    """Represents a single time-tracked task.

    A task with ``duration == 0`` is open-ended and runs until stopped.
    A timed task completes on its own once ``elapsed`` reaches ``duration``.
    """

    id: str                              # uuid4 string
    name: str                            # e.g., "Write report"
    duration: float = 0.0                # Target seconds, 0 = open-ended
    elapsed: float = 0.0                 # Accumulated seconds
    status: TaskStatus = TaskStatus.RUNNING
    is_timed: Optional[bool] = None      # Derived from duration when not given
    creation_date: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        """Auto-generate ID and derive the timed flag if not provided."""
        if not self.id:
            self.id = str(uuid.uuid4())
        if self.is_timed is None:
            self.is_timed = self.duration > 0

    @property
    def is_active(self) -> bool:
        """True while the task is running or paused."""
        return self.status in (TaskStatus.RUNNING, TaskStatus.PAUSED)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def remaining(self) -> Optional[float]:
        """Seconds left until a timed task completes, None for open-ended ones."""
        if not self.is_timed:
            return None
        return max(0.0, self.duration - self.elapsed)

    def toggle_pause(self) -> bool:
        """Flip RUNNING <-> PAUSED.

        Returns:
            True if the status changed, False for a completed task.
        """
        if self.status == TaskStatus.RUNNING:
            self.status = TaskStatus.PAUSED
        elif self.status == TaskStatus.PAUSED:
            self.status = TaskStatus.RUNNING
        else:
            return False
        return True

    def advance(self, seconds: float) -> bool:
        """Accrue time on a running task.

        Args:
            seconds: Time to add.

        Returns:
            True if this call completed the task.
        """
        if self.status != TaskStatus.RUNNING:
            return False

        self.elapsed += seconds
        if self.is_timed and self.elapsed >= self.duration:
            self.elapsed = self.duration
            self.status = TaskStatus.COMPLETED
            return True
        return False

    def to_dict(self) -> dict:
        """Convert Task to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "duration": self.duration,
            "elapsed": self.elapsed,
            "status": self.status.value,
            "is_timed": self.is_timed,
            "creation_date": self.creation_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'Task':
        """Create Task from dictionary (JSON deserialization).

        Unknown keys are ignored and missing optional keys take their
        defaults. Raises KeyError/ValueError/TypeError/OverflowError for records
        that cannot be salvaged (no id or name, unknown status, bad
        timestamp, negative or non-finite times).
        """
        known = {f.name for f in fields(cls)}
        d = {k: v for k, v in d.items() if k in known}

        task_id = d["id"]
        name = d["name"]
        if not isinstance(task_id, str) or not task_id:
            raise ValueError(f"invalid task id: {task_id!r}")
        if not isinstance(name, str):
            raise TypeError(f"invalid task name: {name!r}")

        duration = float(d.get("duration", 0.0))
        elapsed = float(d.get("elapsed", 0.0))
        if not (math.isfinite(duration) and math.isfinite(elapsed)):
            raise ValueError("non-finite time quantity")
        if duration < 0 or elapsed < 0:
            raise ValueError("negative time quantity")

        # Anything but a real bool is re-derived from the duration
        is_timed = d.get("is_timed")
        if not isinstance(is_timed, bool):
            is_timed = None

        creation_date = d.get("creation_date")
        if creation_date is None:
            creation_date = datetime.now()
        else:
            creation_date = datetime.fromisoformat(creation_date)
            # Days are local; keep every timestamp naive local time
            if creation_date.tzinfo is not None:
                creation_date = creation_date.astimezone().replace(tzinfo=None)

        task = cls(
            id=task_id,
            name=name,
            duration=duration,
            elapsed=elapsed,
            status=TaskStatus(d.get("status", TaskStatus.RUNNING.value)),
            is_timed=is_timed,
            creation_date=creation_date,
        )

        # Repair data written before the clamp existed
        if task.is_timed and task.elapsed > task.duration:
            task.elapsed = task.duration

        return task
