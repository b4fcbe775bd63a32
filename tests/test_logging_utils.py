"""Tests for logging configuration helpers."""

import logging
import os

import pytest

from webdevice.core.logging_utils import configure_logging, normalize_log_level, prepare_log_file


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.mark.parametrize(
    "given,expected",
    [(None, "INFO"), ("", "INFO"), ("warn", "WARNING"), (" debug ", "DEBUG"), ("loud", "INFO")],
)
def test_normalize_log_level(given, expected):
    assert normalize_log_level(given) == expected


def test_prepare_log_file_reset_deletes(tmp_path):
    log_file = tmp_path / "logs" / "webdevice.log"
    log_file.parent.mkdir()
    log_file.write_text("old content")

    prepare_log_file(log_file, reset_on_start=True)

    assert not log_file.exists()


def test_prepare_log_file_keeps_log_without_reset(tmp_path):
    log_file = tmp_path / "webdevice.log"
    log_file.write_text("old content")

    prepare_log_file(log_file, reset_on_start=False)

    assert log_file.read_text() == "old content"


def test_prepare_log_file_creates_parent_directory(tmp_path):
    log_file = tmp_path / "nested" / "logs" / "webdevice.log"

    prepare_log_file(log_file)

    assert log_file.parent.is_dir()
    assert not log_file.exists()


def test_configure_logging_attaches_file_handler_once(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "run.log"

    assert configure_logging("debug", log_file=log_file) == "DEBUG"
    configure_logging("debug", log_file=log_file)

    file_handlers = [
        h for h in restore_root_logger.handlers
        if isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_file)
    ]
    assert len(file_handlers) == 1

    logging.getLogger("webdevice.test").debug("hello file")
    file_handlers[0].flush()
    assert "hello file" in log_file.read_text(encoding="utf-8")


def test_configure_logging_appends_without_reset(tmp_path, restore_root_logger):
    log_file = tmp_path / "run.log"
    log_file.write_text("previous run\n", encoding="utf-8")

    configure_logging("info", log_file=log_file, reset_on_start=False)
    logging.getLogger("webdevice.test").info("next run")
    for handler in restore_root_logger.handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert content.startswith("previous run")
    assert "next run" in content
