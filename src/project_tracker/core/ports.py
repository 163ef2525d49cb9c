# src/project_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The service depends on a Protocol instead of the concrete flat-file store.
This keeps storage swappable and lets tests count saves with a fake.
"""

from pathlib import Path
from typing import Protocol

from ..tasks.task_models import TaskList


class TaskRepo(Protocol):
    @property
    def path(self) -> Path: ...

    def load(self) -> TaskList: ...
    def save(self, tasks: TaskList) -> None: ...
