# src/project_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_service import TaskListService
from .ports import TaskRepo


@dataclass
class AppState:
    # Settings stay on the state so commands can read rendering flags.
    settings: Any

    task_store: TaskRepo
    service: TaskListService
