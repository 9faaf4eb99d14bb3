# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskboard.logging_setup import setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_file_log_gets_everything(tmp_path: Path, restore_root_logging) -> None:
    setup_logging(level="WARNING", log_dir=tmp_path / "logs")
    logging.getLogger("taskboard.test").debug("debug line")
    logging.getLogger("someplugin").info("plugin chatter")

    for h in logging.getLogger().handlers:
        h.flush()
    text = (tmp_path / "logs" / "taskboard.log").read_text(encoding="utf-8")
    assert "debug line" in text
    assert "plugin chatter" in text


def test_repeated_setup_does_not_duplicate_handlers(restore_root_logging) -> None:
    setup_logging()
    setup_logging()

    assert len(logging.getLogger().handlers) == 1
