# src/project_tracker/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import os
import re
import shutil
from pathlib import Path

from .task_errors import StoreIOError
from .task_models import Task, TaskList

logger = logging.getLogger(__name__)

SEPARATOR = ";"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_flag(raw: str) -> bool:
    """
    Completion flag as written before the separator.

    Parsed like C atoi (leading whitespace, optional sign, leading digits,
    anything else is 0); only a value equal to 1 means completed.
    """
    m = _LEADING_INT.match(raw)
    if not m:
        return False
    return int(m.group(1)) == 1


def parse_line(line: str) -> tuple[bool, str]:
    """
    Parse one record: "<flag>;<text>".

    Only the first separator counts. A line without one is an open task whose
    text is the whole line. Trailing line terminators are dropped.
    """
    line = line.rstrip("\r\n")
    flag, sep, text = line.partition(SEPARATOR)
    if not sep:
        return False, line
    return parse_flag(flag), text


def format_line(task: Task) -> str:
    return f"{1 if task.completed else 0}{SEPARATOR}{task.text}\n"


class TaskStore:
    """
    Flat-file task store.

    File format is one record per line, "0;text" or "1;text", UTF-8, no
    escaping. Bytes that are not valid UTF-8 are carried through unchanged.
    The whole file is rewritten on every save (temp file + rename next to the
    real file, so a symlinked path stays a symlink and keeps its mode).

    There is no cross-process locking. The store remembers the file stamp it
    last saw and warns when somebody else rewrote the file in between.
    """

    def __init__(self, path: str | Path = "tasks.txt") -> None:
        self._path = Path(path)
        self._seen_stamp: tuple[int, int] | None = None
        logger.debug("TaskStore ready path=%s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    # ---- low-level helpers ----

    def _stat_stamp(self) -> tuple[int, int] | None:
        try:
            st = self._path.stat()
        except FileNotFoundError:
            return None
        return (st.st_mtime_ns, st.st_size)

    def _warn_if_foreign_write(self) -> None:
        try:
            current = self._stat_stamp()
        except OSError:
            return
        if current is not None and current != self._seen_stamp:
            logger.warning(
                "%s changed on disk since it was last loaded or saved; "
                "another instance may be writing the same file. Overwriting.",
                self._path,
            )

    # ---- public API ----

    def load(self) -> TaskList:
        tasks = TaskList()
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            logger.info("No %s found. Starting with an empty list.", self._path)
            self._seen_stamp = None
            return tasks
        except OSError as e:
            raise StoreIOError(f"Could not read {self._path}: {e}") from e

        text = raw.decode("utf-8", errors="surrogateescape")
        lines = text.split("\n")
        if lines and lines[-1] == "":
            # terminator of the last record, not an extra record
            lines.pop()

        for line in lines:
            completed, task_text = parse_line(line)
            tasks.append(task_text, completed)

        with contextlib.suppress(OSError):
            self._seen_stamp = self._stat_stamp()

        logger.info("Loaded %d tasks from %s", len(tasks), self._path)
        return tasks

    def save(self, tasks: TaskList) -> None:
        self._warn_if_foreign_write()

        payload = "".join(format_line(t) for t in tasks)
        # Replace the link target, not the link.
        target = self._path.resolve()
        tmp = target.with_name(target.name + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8", errors="surrogateescape", newline="\n") as f:
                f.write(payload)
            if target.exists():
                shutil.copymode(target, tmp)
            os.replace(tmp, target)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise StoreIOError(f"Could not open {self._path} for writing: {e}") from e

        with contextlib.suppress(OSError):
            self._seen_stamp = self._stat_stamp()

        logger.debug("Saved %d tasks to %s", len(tasks), self._path)
