# src/project_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local directories exist,
- loads the task file once and wires TaskStore + TaskListService into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_errors import StoreIOError
from ..tasks.task_models import TaskList
from ..tasks.task_service import TaskListService
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().

    An unreadable task file is not fatal: the session starts with an empty list.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(settings.tasks_path)
    try:
        tasks = store.load()
    except StoreIOError:
        logger.exception("Failed to load tasks; starting with an empty list.")
        tasks = TaskList()

    return AppState(
        settings=settings,
        task_store=store,
        service=TaskListService(store, tasks),
    )
