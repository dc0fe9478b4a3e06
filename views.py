"""Read-only projections over the task collection.

Nothing here mutates tasks or caches results; every call recomputes from
the list it is given.
"""

from datetime import datetime, date, time, timedelta
from typing import Dict, List, Optional, Tuple

from models import Task, TaskStatus


def start_of_day(moment: datetime) -> datetime:
    """Local midnight of the day containing ``moment``."""
    return datetime.combine(moment.date(), time.min)


def is_today(task: Task, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now()
    return task.creation_date.date() == now.date()


def today_tasks(tasks: List[Task], now: Optional[datetime] = None) -> List[Task]:
    """
    Tasks created on the current local day.

    Running and paused tasks come first, completed ones last, newest first
    within each group.
    """
    now = now or datetime.now()
    todays = [t for t in tasks if is_today(t, now)]
    # Two stable passes: newest first, then active before completed
    todays.sort(key=lambda t: t.creation_date, reverse=True)
    todays.sort(key=lambda t: 0 if t.is_active else 1)
    return todays


def tasks_by_date(tasks: List[Task]) -> Dict[datetime, List[Task]]:
    """Group every task by the start of its creation day, keeping collection order."""
    grouped: Dict[datetime, List[Task]] = {}
    for task in tasks:
        grouped.setdefault(start_of_day(task.creation_date), []).append(task)
    return grouped


def history(tasks: List[Task]) -> List[Tuple[datetime, List[Task]]]:
    """Day groups ordered newest day first."""
    return sorted(tasks_by_date(tasks).items(), key=lambda item: item[0], reverse=True)


def running_count(tasks: List[Task]) -> int:
    return sum(1 for t in tasks if t.status == TaskStatus.RUNNING)


def completed_count(tasks: List[Task]) -> int:
    return sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)


def footer_text(tasks: List[Task]) -> str:
    return f"{running_count(tasks)} running / {completed_count(tasks)} completed"


def format_date_header(day: datetime, now: Optional[datetime] = None) -> str:
    """
    Label a history group.

    Returns:
        "Today", "Yesterday", or the full localized date,
        e.g. "Saturday, October 17, 2026".
    """
    now = now or datetime.now()
    target: date = day.date()
    if target == now.date():
        return "Today"
    if target == now.date() - timedelta(days=1):
        return "Yesterday"
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def format_time(seconds: float) -> str:
    """Compact duration: "42s", "5m", "1h 5m"."""
    if seconds < 60:
        return f"{int(seconds)}s"
    minutes = int(seconds) // 60
    if minutes < 60:
        return f"{minutes}m"
    hours = minutes // 60
    return f"{hours}h {minutes % 60}m"


def format_time_digital(seconds: float) -> str:
    """Clock-style duration: "01:02:03"."""
    total = int(seconds)
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def progress(task: Task) -> float:
    """Fraction done for timed tasks; open-ended tasks report 1.0."""
    if not task.is_timed or task.duration <= 0:
        return 1.0
    return min(1.0, task.elapsed / task.duration)


def task_caption(task: Task) -> str:
    """Elapsed time, plus the target for timed tasks."""
    caption = format_time_digital(task.elapsed)
    if task.is_timed:
        caption += f" / {format_time_digital(task.duration)}"
    return caption
