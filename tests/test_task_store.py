# tests/test_task_store.py

from __future__ import annotations

import logging
from datetime import timedelta

from config import TASKS_KEY
from models import TaskStatus
from storage import MemoryBlobStore, TaskRepository, decode_tasks
from task_store import TaskStore

from .fakes import ExplodingNotifier, FailingBlobStore


def tick(store: TaskStore, n: int) -> None:
    for _ in range(n):
        store.on_tick(1.0)


def test_open_ended_task_keeps_running(store, notifier) -> None:
    task = store.add_task("Write report", 0)

    assert task is not None
    assert task.is_timed is False
    assert task.status == TaskStatus.RUNNING
    assert task.elapsed == 0

    tick(store, 65)

    assert task.elapsed == 65
    assert task.status == TaskStatus.RUNNING
    assert notifier.names == []


def test_timed_task_completes_and_notifies_once(store, notifier) -> None:
    task = store.add_task("Pomodoro", 1500)

    tick(store, 1500)

    assert task.elapsed == 1500
    assert task.status == TaskStatus.COMPLETED
    assert notifier.names == ["Pomodoro"]

    tick(store, 10)
    assert task.elapsed == 1500
    assert notifier.names == ["Pomodoro"]


def test_pause_freezes_elapsed_and_resume_continues(store) -> None:
    task = store.add_task("X", 100)
    tick(store, 10)
    assert store.toggle_pause(task.id) is True
    assert task.status == TaskStatus.PAUSED

    tick(store, 50)
    assert task.elapsed == 10

    assert store.toggle_pause(task.id) is True
    tick(store, 90)

    assert task.elapsed == 100
    assert task.status == TaskStatus.COMPLETED


def test_elapsed_never_exceeds_duration_with_coarse_ticks(store) -> None:
    task = store.add_task("Coarse", 10)

    store.on_tick(3.0)
    store.on_tick(3.0)
    store.on_tick(3.0)
    store.on_tick(3.0)

    assert task.elapsed == 10
    assert task.status == TaskStatus.COMPLETED


def test_single_tick_can_complete_many_tasks(store, notifier) -> None:
    a = store.add_task("A", 2)
    b = store.add_task("B", 2)
    c = store.add_task("C", 0)
    completed = []
    store.task_completed.connect(lambda tid, name: completed.append(name))

    tick(store, 2)

    assert a.status == b.status == TaskStatus.COMPLETED
    assert c.status == TaskStatus.RUNNING
    assert sorted(notifier.names) == ["A", "B"]
    assert sorted(completed) == ["A", "B"]


def test_toggle_pause_on_completed_task_is_noop(store, blobs) -> None:
    task = store.add_task("Done soon", 1)
    tick(store, 1)
    writes = blobs.writes

    assert store.toggle_pause(task.id) is False
    tick(store, 5)

    assert task.status == TaskStatus.COMPLETED
    assert task.elapsed == 1
    assert blobs.writes == writes


def test_stop_before_target_completes_without_notification(store, notifier) -> None:
    task = store.add_task("Short", 100)
    tick(store, 40)

    assert store.stop_task(task.id) is True

    assert task.status == TaskStatus.COMPLETED
    assert task.elapsed == 40
    assert notifier.names == []

    tick(store, 100)
    assert task.elapsed == 40


def test_stop_paused_task_completes_it(store) -> None:
    task = store.add_task("Paused", 0)
    store.toggle_pause(task.id)

    store.stop_task(task.id)

    assert task.status == TaskStatus.COMPLETED


def test_stop_at_target_notifies(qapp, notifier, clock) -> None:
    # A running record already at its target, e.g. saved right before the last tick landed.
    blobs = MemoryBlobStore({
        TASKS_KEY: (
            b'[{"id": "t1", "name": "Edge", "duration": 30, "elapsed": 30,'
            b' "status": "running", "is_timed": true,'
            b' "creation_date": "2026-10-18T09:00:00"}]'
        )
    })
    store = TaskStore(TaskRepository(blobs, TASKS_KEY), notifier, clock=clock)
    store.load()

    store.stop_task("t1")

    assert store.get("t1").status == TaskStatus.COMPLETED
    assert notifier.names == ["Edge"]


def test_stop_completed_task_does_not_notify_again(store, notifier) -> None:
    task = store.add_task("Pomodoro", 3)
    tick(store, 3)

    assert store.stop_task(task.id) is False
    assert notifier.names == ["Pomodoro"]


def test_unknown_ids_are_ignored(store, blobs) -> None:
    store.add_task("Real", 0)
    writes = blobs.writes

    assert store.toggle_pause("nope") is False
    assert store.stop_task("nope") is False
    assert blobs.writes == writes


def test_empty_names_leave_collection_unchanged(store, blobs) -> None:
    assert store.add_task("", 0) is None
    assert store.add_task("   \t ", 60) is None

    assert store.tasks == []
    assert blobs.writes == 0


def test_negative_duration_is_open_ended(store) -> None:
    task = store.add_task("Odd", -30)

    assert task.duration == 0
    assert task.is_timed is False


def test_new_tasks_go_to_the_head(store, clock) -> None:
    first = store.add_task("first", 0)
    clock.advance(seconds=1)
    second = store.add_task("second", 0)

    assert [t.id for t in store.tasks] == [second.id, first.id]
    assert second.creation_date == first.creation_date + timedelta(seconds=1)


def test_ids_are_unique(store) -> None:
    ids = {store.add_task(f"task {i}", 0).id for i in range(50)}
    assert len(ids) == 50


def test_every_mutation_is_persisted(store, blobs) -> None:
    task = store.add_task("Saved", 0)
    assert blobs.writes == 1

    store.toggle_pause(task.id)
    assert blobs.writes == 2

    store.on_tick(1.0)  # nothing running
    assert blobs.writes == 2

    store.toggle_pause(task.id)
    store.on_tick(1.0)
    assert blobs.writes == 4

    saved = decode_tasks(blobs.blobs[TASKS_KEY])
    assert saved[0].elapsed == 1.0
    assert saved[0].status == TaskStatus.RUNNING


def test_changed_signal_fires_on_mutation(store) -> None:
    fired = []
    store.changed.connect(lambda: fired.append(True))

    task = store.add_task("Observed", 0)
    store.toggle_pause(task.id)

    assert len(fired) == 2


def test_save_failure_keeps_memory_state(qapp, notifier, clock, caplog) -> None:
    failing = FailingBlobStore()
    store = TaskStore(TaskRepository(failing, TASKS_KEY), notifier, clock=clock)
    store.load()

    with caplog.at_level(logging.ERROR):
        task = store.add_task("Unsaved", 0)
        store.on_tick(1.0)

    assert failing.attempts == 2
    assert store.get(task.id).elapsed == 1.0
    assert "disk full" in caplog.text


def test_notifier_failure_is_swallowed(qapp, repository, clock, caplog) -> None:
    notifier = ExplodingNotifier()
    store = TaskStore(repository, notifier, clock=clock)
    store.load()
    task = store.add_task("Loud", 1)

    with caplog.at_level(logging.WARNING):
        store.on_tick(1.0)

    assert notifier.calls == 1
    assert task.status == TaskStatus.COMPLETED
    assert "Loud" in caplog.text


def test_store_reloads_saved_state(qapp, repository, notifier, clock) -> None:
    store = TaskStore(repository, notifier, clock=clock)
    store.load()
    a = store.add_task("A", 0)
    b = store.add_task("B", 10)
    tick(store, 3)
    store.toggle_pause(a.id)

    reloaded = TaskStore(repository, notifier, clock=clock)
    reloaded.load()

    assert reloaded.tasks == store.tasks
    assert [t.id for t in reloaded.tasks] == [b.id, a.id]


def test_today_accessors(store, clock) -> None:
    clock.advance(days=-1)
    store.add_task("yesterday", 0)
    clock.advance(days=1)
    running = store.add_task("running", 0)
    done = store.add_task("done", 0)
    store.stop_task(done.id)

    assert [t.name for t in store.today_tasks()] == ["running", "done"]
    assert store.running_count() == 1
    assert store.completed_count() == 1
    assert running in store.today_tasks()
    assert len(store.tasks_by_date()) == 2
