"""
File-backed task repository.

``TaskRepository`` owns the authoritative, in-memory list of tasks and
mirrors it to a single JSON document after every mutation.

Consistency contract:
- The file is read once, when the repository is constructed.  A missing
  file is an empty list; an unreadable file or a document that is not a
  JSON array is logged and treated as empty.  Within a valid array each
  malformed record is logged and skipped, so startup never fails.
- Ids are ``max(stored ids) + 1`` at startup (1 for an empty file), counting
  skipped records that carry an integer id, and only ever increase
  afterwards.
- Each mutation runs read -> mutate -> persist under one lock, so
  concurrent writers cannot hand out duplicate ids or lose updates.
- Persisting writes a temporary file beside the target and renames it
  over the target, so a crash mid-write leaves the previous document
  intact.
- A failed persist is logged and swallowed.  The in-memory state stays
  authoritative for the running process; the client still sees success.
- Every returned task is a copy.  Callers never hold a live reference.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import replace
from pathlib import Path

from .errors import TaskNotFoundError
from .models import SortOrder, Task, TaskStatus, utcnow

logger = logging.getLogger(__name__)


class TaskRepository:
    """
    Serialized, persistent collection of tasks.

    Args:
        path: Location of the JSON document.  Parent directories are
            created on first persist.
        clock: Callable returning the current UTC datetime; used to stamp
            ``created_at``.
    """

    def __init__(self, path: str | os.PathLike[str], clock=utcnow) -> None:
        self.path = Path(path)
        self._clock = clock
        self._lock = threading.RLock()
        self._tasks: list[Task] = []
        self._next_id = 1
        self.load()

    # -----------------------------------------------------------------
    # Loading and persisting
    # -----------------------------------------------------------------

    def load(self) -> list[Task]:
        """
        (Re)load the task list from disk and reset the id counter.

        A record that fails to parse is logged and skipped; the rest load.
        Skipped records still count towards the next id.

        Returns:
            Copies of the loaded tasks, in file order.
        """
        with self._lock:
            records = self._read_records()
            self._tasks = []
            highest_id = 0
            for index, record in enumerate(records):
                raw_id = record.get("id") if isinstance(record, dict) else None
                if isinstance(raw_id, int) and not isinstance(raw_id, bool):
                    highest_id = max(highest_id, raw_id)
                try:
                    self._tasks.append(Task.from_dict(record))
                except (ValueError, KeyError, TypeError):
                    logger.exception("Skipping malformed task record %d in %s", index, self.path)
            self._next_id = highest_id + 1
            logger.info(
                "Loaded %d tasks from %s (next id %d)",
                len(self._tasks),
                self.path,
                self._next_id,
            )
            return [replace(task) for task in self._tasks]

    def _read_records(self) -> list:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            records = json.loads(raw or "[]")
            if not isinstance(records, list):
                raise TypeError(f"expected a JSON array, got {type(records).__name__}")
            return records
        except (OSError, ValueError, TypeError):
            logger.exception("Failed to read tasks file %s; starting with no tasks", self.path)
            return []

    def _persist(self) -> None:
        """Write the whole list to disk.  Caller must hold the lock."""
        tmp_name = None
        try:
            document = json.dumps([task.to_dict() for task in self._tasks], indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(document)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except (OSError, TypeError):
            logger.exception("Failed to write tasks file %s", self.path)
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp_name)

    # -----------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    def list(
        self,
        status: TaskStatus | str | None = None,
        sort: SortOrder | str | None = None,
    ) -> list[Task]:
        """
        Return a snapshot of the tasks.

        Args:
            status: Keep only tasks whose status equals this value.  An
                unknown value simply matches nothing.
            sort: ``"asc"`` or ``"desc"`` orders by ``created_at`` (ties
                keep insertion order).  Anything else keeps insertion
                order.
        """
        with self._lock:
            results = [replace(task) for task in self._tasks]

        if status:
            wanted = status.value if isinstance(status, TaskStatus) else status
            results = [task for task in results if task.status.value == wanted]

        sort_value = sort.value if isinstance(sort, SortOrder) else sort
        if sort_value in (SortOrder.ASC.value, SortOrder.DESC.value):
            results.sort(
                key=lambda task: task.created_at,
                reverse=sort_value == SortOrder.DESC.value,
            )
        return results

    def get(self, task_id: int) -> Task:
        """
        Return a copy of one task.

        Raises:
            TaskNotFoundError: No task has this id.
        """
        with self._lock:
            return replace(self._find(task_id))

    def _find(self, task_id: int) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        logger.warning("Task %s not found", task_id)
        raise TaskNotFoundError()

    # -----------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------

    def create(
        self,
        title: str,
        description: str,
        status: TaskStatus | str | None = None,
    ) -> Task:
        """Append a new task and persist the list before returning."""
        with self._lock:
            task = Task(
                id=self._next_id,
                title=title,
                description=description,
                status=TaskStatus(status) if status else TaskStatus.PENDING,
                created_at=self._clock(),
            )
            self._next_id += 1
            self._tasks.append(task)
            self._persist()
            logger.info("Created task %s", task.id)
            return replace(task)

    def update(
        self,
        task_id: int,
        title: str | None = None,
        description: str | None = None,
        status: TaskStatus | str | None = None,
    ) -> Task:
        """
        Partially update a task; ``None`` leaves a field unchanged.

        ``id`` and ``created_at`` are never modified.

        Raises:
            TaskNotFoundError: No task has this id.
        """
        with self._lock:
            task = self._find(task_id)
            if title is not None:
                task.title = title
            if description is not None:
                task.description = description
            if status is not None:
                task.status = TaskStatus(status)
            self._persist()
            logger.info("Updated task %s", task_id)
            return replace(task)

    def delete(self, task_id: int) -> Task:
        """
        Remove a task and return it.

        Raises:
            TaskNotFoundError: No task has this id.
        """
        with self._lock:
            task = self._find(task_id)
            self._tasks.remove(task)
            self._persist()
            logger.info("Deleted task %s", task_id)
            return task
