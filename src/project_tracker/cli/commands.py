# src/project_tracker/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import sys
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_errors import TaskNotFoundError, TaskValidationError
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_STRIKE_ON = "\033[9m"
_STRIKE_OFF = "\033[0m"


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("Any line that is not a command is added as a new task.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def render_task(position: int, task: Task, *, strike: bool = False) -> str:
    box = "[x]" if task.completed else "[ ]"
    text = task.text
    if strike and task.completed:
        text = f"{_STRIKE_ON}{text}{_STRIKE_OFF}"
    return f"{position:>3}. {box} {text}"


def _strike_enabled(state: AppState) -> bool:
    if not getattr(state.settings, "strike_completed", False):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def format_task_list(state: AppState) -> str:
    tasks = state.service.list_tasks()
    if not tasks:
        return "No tasks yet. Type a task and press Enter to add it."
    strike = _strike_enabled(state)
    title = str(getattr(state.settings, "app_name", "Tasks"))
    lines = [f"{title}:"]
    lines.extend(render_task(i, t, strike=strike) for i, t in enumerate(tasks, start=1))
    return "\n".join(lines)


def _parse_positions(args: list[str]) -> list[int] | None:
    out: list[int] = []
    for arg in args:
        for piece in arg.split(","):
            piece = piece.strip()
            if not piece:
                continue
            try:
                out.append(int(piece))
            except ValueError:
                return None
    return out


def add_from_text(state: AppState, text: str) -> str:
    """Add a task from free text (the console's plain-line path and /add)."""
    try:
        task = state.service.add_task(text, strict=True)
    except TaskValidationError as e:
        return f"Task not added: {e}."
    if task is None:
        return "Task not added."
    pos = state.service.position_of(task.id)
    return f"Added #{pos}: {task.text}"


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return format_task_list(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /add <task text>"
    return add_from_text(state, " ".join(args))


def cmd_done(state: AppState, args: list[str]) -> str:
    """
    /done N   -> toggle completion of task #N
    """
    positions = _parse_positions(args)
    if not positions or len(positions) != 1:
        return "Usage: /done <number>"

    pos = positions[0]
    try:
        task = state.service.task_at(pos)
        task = state.service.toggle_task(task.id)
    except TaskNotFoundError:
        return f"No task #{pos}. Use /list to see task numbers."

    mark = "done" if task.completed else "not done"
    return f"#{pos} marked {mark}: {task.text}"


def cmd_remove(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /rm 2        -> remove task #2
    /rm 1 3,4    -> remove several tasks at once (saved once)
    """
    positions = _parse_positions(args)
    if not positions:
        return "Usage: /rm <number> [<number> ...]"

    refs: list[int] = []
    missing: list[int] = []
    for pos in sorted(set(positions)):
        try:
            refs.append(state.service.task_at(pos).id)
        except TaskNotFoundError:
            missing.append(pos)

    if missing and emit:
        with contextlib.suppress(Exception):
            emit("Skipping unknown task numbers: " + ", ".join(f"#{p}" for p in missing))

    removed = state.service.remove_tasks(refs)
    if removed == 0:
        return "Nothing removed."
    noun = "task" if removed == 1 else "tasks"
    return f"Removed {removed} {noun}."


def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = state.service.list_tasks()
    done = sum(1 for t in tasks if t.completed)
    err = state.service.last_save_error
    saved = "OK" if err is None else f"FAILED ({err})"
    return (
        "Status:\n"
        f"  File: {state.task_store.path}\n"
        f"  Tasks: {len(tasks)} ({done} done, {len(tasks) - done} open)\n"
        f"  Last save: {saved}"
    )


def cmd_save(state: AppState, args: list[str]) -> str:
    if state.service.save():
        return f"Saved {len(state.service.list_tasks())} tasks to {state.task_store.path}."
    return "Save failed. Your tasks are kept in memory; see the log for details."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show all tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <text>.")
registry.register("done", cmd_done, help_text="Toggle a task done/not done: /done <n>.", aliases=["toggle"])
registry.register(
    "rm", cmd_remove, help_text="Remove tasks: /rm <n> [<n> ...].", aliases=["remove", "del"]
)
registry.register("status", cmd_status, help_text="Show file path, totals and save state.")
registry.register("save", cmd_save, help_text="Save the list now (retry after a failed save).")
