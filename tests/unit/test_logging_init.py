from __future__ import annotations

import logging
from io import StringIO

from equipment_import.logging.init import (
    APP_LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    reset_logging,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == APP_LOGGER_NAME == "equipment_import"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent_and_debug_lowers_level():
    first = setup_logging()
    second = setup_logging(debug=True)
    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.DEBUG
    assert second.handlers[0].level == logging.DEBUG


def test_labeled_prefixes():
    captured = StringIO()
    logger = logging.getLogger("test_equipment_import_labels")
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(captured)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(SUMMARY_LEVEL, "Test summary message")

    lines = captured.getvalue().strip().split("\n")
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_get_logger_and_log_summary(capsys):
    logger = get_logger()
    assert logger is setup_logging()
    log_summary("files=0/0")
    assert "SUMMARY files=0/0" in capsys.readouterr().out


def test_library_loggers_reach_app_handler(capsys):
    setup_logging(debug=True)
    logging.getLogger("equipment_import.services.ingest").debug("sheet=S shape=keyed")
    assert "DEBUG sheet=S shape=keyed" in capsys.readouterr().out


def test_reset_logging_drops_handlers():
    logger = setup_logging()
    reset_logging()
    assert logger.handlers == []
    assert len(setup_logging().handlers) == 1
