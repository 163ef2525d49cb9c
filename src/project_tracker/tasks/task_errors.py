# src/project_tracker/tasks/task_errors.py

from __future__ import annotations


class TaskListError(Exception):
    """Base class for task list failures."""


class StoreIOError(TaskListError, OSError):
    """The backing file could not be read or written (a missing file on load is not an error)."""


class TaskNotFoundError(TaskListError, LookupError):
    def __init__(self, ref: int) -> None:
        super().__init__(f"no task with reference {ref}")
        self.ref = ref


class TaskValidationError(TaskListError, ValueError):
    pass
