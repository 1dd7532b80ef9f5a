from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Labeled console logging for the importer.

Every CLI line goes through the `vehicle_import` logger and starts with a
label: INFO, WARN, ERROR or SUMMARY (DEBUG with --debug). Module loggers
created with logging.getLogger(__name__) sit below that namespace and reach
the same stdout handler. Standard library logging only.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "set_debug",
    "log_summary",
    "reset_logging",
]

LOGGER_NAME = "vehicle_import"

# between INFO (20) and WARNING (30)
SUMMARY_LEVEL = 25
logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """`LABEL message`, with WARN instead of WARNING."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        line = f"{label} {record.getMessage()}"
        if record.exc_info and record.levelno >= logging.ERROR:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(stream: TextIO | None = None, level: int = logging.INFO) -> logging.Logger:
    """Attach the labeled handler to the application logger once.

    Later calls return the same logger untouched until reset_logging().
    `stream` defaults to the sys.stdout of the first call.
    """
    global _logger
    if _logger is not None:
        return _logger

    app = logging.getLogger(LOGGER_NAME)
    for old in list(app.handlers):
        app.removeHandler(old)

    console = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console.setFormatter(LabeledFormatter())
    app.addHandler(console)
    # no root propagation: one line per record
    app.propagate = False

    _logger = app
    _apply_level(level)
    return app


def _apply_level(level: int) -> None:
    app = get_logger()
    app.setLevel(level)
    for h in app.handlers:
        h.setLevel(level)


def get_logger() -> logging.Logger:
    """The application logger, configured on first use."""
    return _logger if _logger is not None else setup_logging()


def set_debug(enabled: bool = True) -> None:
    """Toggle DEBUG output on the application logger and its handlers."""
    _apply_level(logging.DEBUG if enabled else logging.INFO)


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup_logging() rebinds the stream. Tests only."""
    global _logger
    _logger = None
