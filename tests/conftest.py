# tests/conftest.py

from __future__ import annotations

import os
import tempfile
from datetime import datetime

# Must be set before config / Qt are imported by any test module.
os.environ.setdefault("SLATE_DIR", tempfile.mkdtemp(prefix="slate-tests-"))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from config import TASKS_KEY
from storage import MemoryBlobStore, TaskRepository
from task_store import TaskStore

from .fakes import FakeClock, RecordingNotifier

NOW = datetime(2026, 10, 18, 12, 0, 0)


@pytest.fixture(scope="session")
def qapp():
    """
    One Qt application for the whole run.

    A widgets application when QtWidgets can load, otherwise a core one;
    QTimer needs either to have an event dispatcher.
    """
    try:
        from PyQt6.QtWidgets import QApplication
    except ImportError:
        from PyQt6.QtCore import QCoreApplication as QApplication
    return QApplication.instance() or QApplication([])


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture()
def blobs() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture()
def repository(blobs: MemoryBlobStore) -> TaskRepository:
    return TaskRepository(blobs, TASKS_KEY)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def store(qapp, repository: TaskRepository, notifier: RecordingNotifier, clock: FakeClock) -> TaskStore:
    """Store over an in-memory blob store, a recording notifier and a fixed clock."""
    s = TaskStore(repository, notifier, clock=clock)
    s.load()
    return s
