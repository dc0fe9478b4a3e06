"""Persistence layer for slate application.

Tasks are stored as one JSON blob in a key-value blob store. The blob store
is an injected interface so the task store can run against the file system
in the app and against memory in tests.
"""

from __future__ import annotations

import json
import logging
import os
import queue
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from models import Task

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Saving the task collection failed (encoding or storage)."""


class DecodeError(ValueError):
    """Persisted data is not a decodable task collection."""


class BlobStore(Protocol):
    """Read/write named byte blobs."""

    def read(self, key: str) -> Optional[bytes]:
        """Return the blob, or None if it was never written."""
        ...

    def write(self, key: str, data: bytes) -> None:
        ...


class MemoryBlobStore:
    """In-memory blob store."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self.blobs: Dict[str, bytes] = dict(initial or {})
        self.writes = 0

    def read(self, key: str) -> Optional[bytes]:
        return self.blobs.get(key)

    def write(self, key: str, data: bytes) -> None:
        self.blobs[key] = bytes(data)
        self.writes += 1


class FileBlobStore:
    """Blob store keeping one file per key inside a directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / key

    def read(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def write(self, key: str, data: bytes) -> None:
        """Write the blob using an atomic temp-file rename."""
        self.directory.mkdir(parents=True, exist_ok=True)

        # Create temp file in same directory as target
        fd, temp_path = tempfile.mkstemp(
            dir=self.directory,
            prefix=f".{key}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.path_for(key))
        except BaseException:
            # Clean up temp file, then let the caller see the failure
            try:
                os.unlink(temp_path)
            except FileNotFoundError:
                pass
            raise


def encode_tasks(tasks: List[Task]) -> bytes:
    """Serialize the task collection, preserving order."""
    data = [task.to_dict() for task in tasks]
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


def decode_tasks(blob: bytes) -> List[Task]:
    """
    Deserialize a task collection.

    Records that cannot be salvaged are skipped with a warning, as are
    records repeating an id already seen.

    Raises:
        DecodeError: If the blob is not UTF-8 JSON or not a JSON list.
    """
    try:
        data = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise DecodeError(f"undecodable task data: {e}") from e

    if not isinstance(data, list):
        raise DecodeError(f"task data is a {type(data).__name__}, expected a list")

    tasks = []
    seen = set()
    for task_dict in data:
        if not isinstance(task_dict, dict):
            logger.warning("Skipping non-object task record: %r", task_dict)
            continue
        try:
            task = Task.from_dict(task_dict)
        except (KeyError, ValueError, TypeError, OverflowError) as e:
            logger.warning("Failed to load task %s: %r", task_dict.get("id", "unknown"), e)
            continue
        if task.id in seen:
            logger.warning("Skipping duplicate task id %s", task.id)
            continue
        seen.add(task.id)
        tasks.append(task)

    return tasks


class TaskRepository:
    """Saves and loads the whole task collection under one blob key."""

    def __init__(self, blob_store: BlobStore, key: str) -> None:
        self.blob_store = blob_store
        self.key = key

    def load(self) -> List[Task]:
        """
        Load the task collection.

        Returns:
            List of Task objects. Empty list if nothing was saved yet, or if
            the saved data cannot be read or decoded.
        """
        try:
            blob = self.blob_store.read(self.key)
        except OSError as e:
            logger.error("Failed to read %s, starting fresh: %s", self.key, e)
            return []

        if blob is None:
            return []

        try:
            tasks = decode_tasks(blob)
        except DecodeError as e:
            logger.warning("%s, starting fresh", e)
            return []

        logger.info("Loaded %d tasks from %s", len(tasks), self.key)
        return tasks

    def save(self, tasks: List[Task]) -> None:
        """
        Save the task collection.

        Raises:
            PersistenceError: If encoding or writing fails.
        """
        try:
            data = encode_tasks(tasks)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to encode tasks: {e}") from e
        self.write(data)

    def write(self, data: bytes) -> None:
        """Write an already encoded collection."""
        try:
            self.blob_store.write(self.key, data)
        except OSError as e:
            raise PersistenceError(f"Failed to save {self.key}: {e}") from e


class AsyncWriter:
    """
    Serialized background writer in front of a TaskRepository.

    save() snapshots the collection on the calling thread and hands the bytes
    to a single worker thread, so writes land in submission order and the
    caller never blocks on disk. Failures are logged; the in-memory state
    stays authoritative and the next save reconciles.
    """

    def __init__(self, repository: TaskRepository) -> None:
        self.repository = repository
        self._queue: "queue.Queue[bytes | None]" = queue.Queue()
        self._closed = False
        self._worker = threading.Thread(
            target=self._run, name="slate-writer", daemon=True
        )
        self._worker.start()

    def load(self) -> List[Task]:
        return self.repository.load()

    def save(self, tasks: List[Task]) -> None:
        """
        Enqueue a snapshot of the collection.

        Raises:
            PersistenceError: If the snapshot cannot be encoded, or the
                writer is closed.
        """
        if self._closed:
            raise PersistenceError("writer is closed")
        try:
            data = encode_tasks(tasks)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to encode tasks: {e}") from e
        self._queue.put(data)

    def flush(self) -> None:
        """Block until every queued snapshot has been written."""
        self._queue.join()

    def close(self) -> None:
        """Drain pending writes and stop the worker."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(None)
        self._worker.join()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    logger.debug("Writer received stop signal")
                    return
                self.repository.write(item)
            except PersistenceError as e:
                logger.error("%s", e)
            except Exception:
                # Keep the worker alive so later snapshots still land
                logger.exception("Unexpected error while saving tasks")
            finally:
                self._queue.task_done()
