# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

from todo_cli.logging_setup import level_from_name, setup_logging


def test_file_handler_gets_debug_records(tmp_path: Path) -> None:
    setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)
    logging.getLogger("todo_cli.test").debug("hello %s", "file")
    for h in logging.getLogger().handlers:
        h.flush()

    text = (tmp_path / "logs" / "todo.log").read_text("utf-8")
    assert "todo_cli.test: hello file" in text


def test_console_filter_drops_third_party_noise(tmp_path: Path, capsys) -> None:
    setup_logging(log_dir=None, console_level=logging.INFO)
    logging.getLogger("some.library").warning("noise")
    logging.getLogger("todo_cli.x").info("signal")

    err = capsys.readouterr().err
    assert "signal" in err
    assert "noise" not in err


def test_level_from_name() -> None:
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("nonsense") == logging.WARNING
