from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Console output of the importer uses one label per line:
INFO | WARN | ERROR | SUMMARY, followed by the message. Standard library
logging only; library modules log through logging.getLogger(__name__), which
propagates into the "equipment_import" application logger configured here.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "reset_logging",
]

APP_LOGGER_NAME = "equipment_import"

# Custom SUMMARY level (between INFO=20 and WARNING=30)
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formatter that prints ``LABEL message``.

    WARNING is shortened to WARN; the SUMMARY level gets its own label so the
    final line of a run can be matched as ``^SUMMARY files=...``.
    """

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        level_label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{level_label} {record.getMessage()}"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the application logger (idempotent).

    Output goes to stdout so that it lines up with the SUMMARY line. Calling
    again with debug=True lowers the level of an existing logger; calling
    again without it leaves the logger as it is.

    Args:
        debug: Emit DEBUG records (per-sheet shape decisions and the like)

    Returns:
        The "equipment_import" logger
    """
    global _logger

    level = logging.DEBUG if debug else logging.INFO
    if _logger is not None:
        if debug:
            _logger.setLevel(level)
            for h in _logger.handlers:
                h.setLevel(level)
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(level)

    # Clear any existing handlers to avoid duplication
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)

    # Prevent propagation to root logger to avoid duplicate output
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Return the application logger, configuring it on first use."""
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    """Log a message at SUMMARY level.

    Args:
        message: Summary text without the label, e.g. "files=2 cpus=10 ..."
    """
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger and drop its handlers.

    Tests call this between cases because the handler holds the sys.stdout
    object that was current when it was created.
    """
    global _logger
    if _logger is not None:
        for handler in _logger.handlers[:]:
            _logger.removeHandler(handler)
    _logger = None
