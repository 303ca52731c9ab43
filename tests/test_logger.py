"""Tests for logging setup."""

import logging

from utils.logger import ROOT_LOGGER_NAME, get_logger, setup_logging


def test_setup_logging_creates_log_file(tmp_path):
    log_file = setup_logging(tmp_path)
    try:
        get_logger('test').debug("debug detail")
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()
        assert log_file.parent == tmp_path
        assert "debug detail" in log_file.read_text(encoding='utf-8')
    finally:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root.handlers):
            handler.close()
        root.handlers.clear()


def test_repeated_setup_does_not_duplicate_handlers(tmp_path):
    setup_logging(tmp_path)
    setup_logging(tmp_path)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    try:
        assert len(root.handlers) == 2
    finally:
        for handler in list(root.handlers):
            handler.close()
        root.handlers.clear()


def test_get_logger_is_nested_under_root():
    assert get_logger('core.refresh').name == 'sheets_map.core.refresh'


def test_console_level_is_configurable(tmp_path):
    setup_logging(tmp_path, console_level=logging.WARNING)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    try:
        levels = sorted(handler.level for handler in root.handlers)
        assert levels == [logging.DEBUG, logging.WARNING]
    finally:
        for handler in list(root.handlers):
            handler.close()
        root.handlers.clear()
