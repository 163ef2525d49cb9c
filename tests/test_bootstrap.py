# tests/test_bootstrap.py

from __future__ import annotations

import logging

import pytest

from project_tracker.cli import main as cli_main
from project_tracker.cli.bootstrap import create_initial_state
from project_tracker.config import Settings


def test_bootstrap_loads_existing_file(settings) -> None:
    settings.tasks_path.write_text("1;finish report\nhello world\n", "utf-8")

    state = create_initial_state(settings=settings)

    assert settings.data_dir.is_dir()
    assert [(t.text, t.completed) for t in state.service.list_tasks()] == [
        ("finish report", True),
        ("hello world", False),
    ]


def test_bootstrap_starts_empty_when_file_unreadable(settings, caplog) -> None:
    settings.tasks_path.mkdir()

    with caplog.at_level(logging.ERROR):
        state = create_initial_state(settings=settings)

    assert state.service.list_tasks() == []
    assert any("starting with an empty list" in r.getMessage() for r in caplog.records)


def test_main_saves_on_exit(settings, monkeypatch) -> None:
    settings.tasks_path.write_text("0;keep me\n", "utf-8")
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **_kw: None)
    monkeypatch.setattr(cli_main.signal, "signal", lambda *_a: None)

    def fake_loop(state) -> None:
        state.service.add_task("added in session")
        raise KeyboardInterrupt

    monkeypatch.setattr(cli_main, "run_console_loop", fake_loop)

    cli_main.main()

    assert settings.tasks_path.read_text("utf-8") == "0;keep me\n0;added in session\n"


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("PTRACK_TASKS_PATH", str(tmp_path / "todo.txt"))
    monkeypatch.setenv("PTRACK_STRIKE_COMPLETED", "off")
    monkeypatch.setenv("PTRACK_APP_NAME", "  ")

    s = Settings.from_env()

    assert s.tasks_path == tmp_path / "todo.txt"
    assert s.strike_completed is False
    assert s.app_name == "Project Tracker"


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PTRACK_TASKS_PATH", "PTRACK_DATA_DIR", "PTRACK_LOG_LEVEL", "PTRACK_LOG_TO_FILE"):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()

    assert str(s.tasks_path) == "tasks.txt"
    assert s.log_level == "INFO"
    assert s.log_to_file is True


def test_main_warns_when_final_save_fails(settings, monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **_kw: None)
    monkeypatch.setattr(cli_main.signal, "signal", lambda *_a: None)

    def fake_loop(state) -> None:
        state.service.add_task("cannot be written")
        settings.tasks_path.unlink()
        settings.tasks_path.mkdir()

    monkeypatch.setattr(cli_main, "run_console_loop", fake_loop)

    cli_main.main()

    out = capsys.readouterr().out
    assert f"[WARN] Could not save tasks to {settings.tasks_path}" in out


def test_sigterm_unwinds_into_final_save(settings, monkeypatch) -> None:
    handlers = {}
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **_kw: None)
    monkeypatch.setattr(cli_main.signal, "signal", lambda signum, h: handlers.setdefault(signum, h))

    def fake_loop(state) -> None:
        # Mutate in memory only, so the file is written by the shutdown save.
        state.service._tasks.append("unsaved")
        handlers[cli_main.signal.SIGTERM](cli_main.signal.SIGTERM, None)

    monkeypatch.setattr(cli_main, "run_console_loop", fake_loop)

    cli_main.main()

    assert settings.tasks_path.read_text("utf-8") == "0;unsaved\n"
