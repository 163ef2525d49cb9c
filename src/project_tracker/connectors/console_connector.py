# src/project_tracker/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from datetime import datetime

from ..cli.commands import add_from_text, format_task_list
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    try:
        if sys.stdout.isatty():
            sys.stdout.write("\033[1A\033[2K\r")
            sys.stdout.write(line + "\n")
            sys.stdout.flush()
        else:
            print(line)
    except (OSError, ValueError):
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _warn_if_unsaved(state: AppState) -> None:
    err = state.service.last_save_error
    if err is not None:
        _print_ts(f"[WARN] Changes are NOT saved to disk: {err}. Use /save to retry.")


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (file=%s).", state.task_store.path)
    _print_ts("[CONSOLE] Type a task and press Enter to add it. Use /help for commands. Use /exit to quit.\n")
    _print_ts(format_task_list(state))

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input(">>> Task: ").strip()
            _rewrite_prev_line(f"[{_ts_local()}] >>> Task: {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = command_registry.handle(state, user_input, emit=emit)
            if reply is None:
                reply = add_from_text(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        _print_ts(reply)
        _warn_if_unsaved(state)

    logger.info("Console connector finished.")
