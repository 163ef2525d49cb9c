# src/project_tracker/tasks/task_service.py

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from ..core.ports import TaskRepo
from .task_errors import StoreIOError, TaskNotFoundError, TaskValidationError
from .task_models import Task, TaskList

logger = logging.getLogger(__name__)


class TaskListService:
    """
    Mutation/query API over the task list.

    Every mutation is followed by exactly one save attempt, so the file never
    lags the in-memory list by more than one operation. A failed save is
    logged and remembered (see `save_failed`); the in-memory list is kept.

    Returned tasks are copies. Front ends refer to tasks by `Task.id`.
    """

    def __init__(self, store: TaskRepo, tasks: TaskList | None = None) -> None:
        self._store = store
        self._tasks = tasks if tasks is not None else TaskList()
        self._lock = threading.RLock()
        self.last_save_error: StoreIOError | None = None

    @property
    def save_failed(self) -> bool:
        return self.last_save_error is not None

    @property
    def store(self) -> TaskRepo:
        return self._store

    def _persist(self) -> bool:
        try:
            self._store.save(self._tasks)
        except StoreIOError as e:
            logger.exception("Failed to save tasks to %s", self._store.path)
            self.last_save_error = e
            return False
        if self.last_save_error is not None:
            logger.info("Tasks saved to %s again after an earlier failure.", self._store.path)
        self.last_save_error = None
        return True

    # ---- mutations ----

    def add_task(self, text: str, *, strict: bool = False) -> Task | None:
        """
        Append a new open task and save.

        Empty or whitespace-only text is ignored (returns None, nothing saved)
        unless `strict` is set, in which case it raises TaskValidationError.
        The text is stored as given, minus trailing line terminators.
        """
        text = text or ""
        if not text.strip():
            if strict:
                raise TaskValidationError("task text is empty")
            logger.debug("Ignoring empty task text.")
            return None
        clean = text.rstrip("\r\n")
        if "\n" in clean or "\r" in clean:
            raise TaskValidationError("task text must be a single line")

        with self._lock:
            task = self._tasks.append(clean)
            logger.debug("Task added id=%s pos=%s", task.id, len(self._tasks))
            self._persist()
            return task.snapshot()

    def toggle_task(self, ref: int) -> Task:
        with self._lock:
            task = self._tasks.get(ref)
            if task is None:
                raise TaskNotFoundError(ref)
            task.completed = not task.completed
            logger.debug("Task toggled id=%s completed=%s", task.id, task.completed)
            self._persist()
            return task.snapshot()

    def remove_tasks(self, refs: Iterable[int]) -> int:
        """Remove every task in `refs` (unknown refs are ignored), then save once."""
        with self._lock:
            removed = self._tasks.remove_ids(refs)
            if not removed:
                return 0
            logger.debug("Tasks removed ids=%s", [t.id for t in removed])
            self._persist()
            return len(removed)

    # ---- queries ----

    def list_tasks(self) -> list[Task]:
        with self._lock:
            return [t.snapshot() for t in self._tasks]

    def task_at(self, position: int) -> Task:
        """Task at a 1-based display position."""
        with self._lock:
            if position < 1 or position > len(self._tasks):
                raise TaskNotFoundError(position)
            return self._tasks.tasks[position - 1].snapshot()

    def position_of(self, ref: int) -> int | None:
        with self._lock:
            return self._tasks.position_of(ref)

    # ---- lifecycle ----

    def save(self) -> bool:
        with self._lock:
            return self._persist()

    def shutdown(self) -> bool:
        """Final unconditional save; repeating it rewrites the same content."""
        with self._lock:
            ok = self._persist()
            logger.info("Task list shut down (%d tasks, saved=%s).", len(self._tasks), ok)
            return ok
