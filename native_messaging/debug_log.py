"""Debug logging setup for native messaging hosts.

stdout carries protocol frames, so diagnostics go to a
log file or stderr, never stdout.
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

LOGGER_NAME = "native_messaging"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
DEFAULT_MAX_LOG_LINES = 1000


def _truncate_log(log_file: Path, max_lines: int) -> None:
    """Keep only the last max_lines lines of an existing log."""
    if not log_file.exists():
        return
    try:
        lines = log_file.read_text().splitlines()
        if len(lines) > max_lines:
            log_file.write_text("\n".join(lines[-max_lines:]) + "\n")
    except OSError:
        pass


def setup_debug_logging(
    log_file: Path | None = None,
    *,
    max_lines: int = DEFAULT_MAX_LOG_LINES,
    level: int = logging.DEBUG,
) -> logging.Logger:
    """Attach a file or stderr handler to the package logger.

    With a log_file, the log is truncated to its last
    max_lines lines on startup and appended to; if the file
    cannot be opened, logging falls back to stderr.
    Repeated calls keep the first handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Don't add handlers if already configured
    if logger.handlers:
        return logger

    handler: logging.Handler
    if log_file is None:
        handler = logging.StreamHandler(sys.stderr)
    else:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            _truncate_log(log_file, max_lines)
            handler = logging.FileHandler(str(log_file))
        except OSError:
            handler = logging.StreamHandler(sys.stderr)

    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT),
    )
    logger.addHandler(handler)
    return logger
