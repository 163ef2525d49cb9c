# src/project_tracker/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace


@dataclass(slots=True)
class Task:
    id: int
    text: str
    completed: bool = False

    def snapshot(self) -> Task:
        return replace(self)


@dataclass(slots=True)
class TaskList:
    """
    Ordered tasks for the session.

    Notes:
    - insertion order is display order and persisted order
    - ids are process-local references handed out from a counter; they are
      never written to disk and stay valid when other tasks are removed
    """

    tasks: list[Task] = field(default_factory=list)
    next_id: int = 1

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def append(self, text: str, completed: bool = False) -> Task:
        task = Task(id=self.next_id, text=text, completed=completed)
        self.next_id += 1
        self.tasks.append(task)
        return task

    def get(self, task_id: int) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def position_of(self, task_id: int) -> int | None:
        """1-based display position of a task, or None."""
        for i, task in enumerate(self.tasks, start=1):
            if task.id == task_id:
                return i
        return None

    def remove_ids(self, task_ids: Iterable[int]) -> list[Task]:
        wanted = set(task_ids)
        if not wanted:
            return []
        removed = [t for t in self.tasks if t.id in wanted]
        if removed:
            self.tasks = [t for t in self.tasks if t.id not in wanted]
        return removed

    def pairs(self) -> list[tuple[bool, str]]:
        """(completed, text) in order; what actually gets persisted."""
        return [(t.completed, t.text) for t in self.tasks]
