"""Logging configuration for the swing scoring engine."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ENGINE_LOGGER = "swing_scoring"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    max_bytes: int = 5 * 1024 * 1024,  # 5MB
    backup_count: int = 3,
    console_output: bool = True,
) -> logging.Logger:
    """
    Configure logging for command-line use of the engine.

    Library callers should leave logging alone; the engine only emits
    records through module loggers under "swing_scoring".

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path of a rotating log file.
        log_format: Log message format.
        date_format: Date format for log messages.
        max_bytes: Size at which the log file rotates.
        backup_count: Number of rotated files to keep.
        console_output: Whether to log to stderr.

    Returns:
        Root logger instance.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(log_format, date_format)

    # stdout carries JSON reports, so console logs go to stderr
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # pandas/numpy chatter stays out of session logs
    logging.getLogger("numexpr").setLevel(logging.WARNING)
    logging.getLogger("fsspec").setLevel(logging.WARNING)

    root_logger.debug(f"Logging configured: level={level}, file={log_file}")

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the engine namespace.

    Args:
        name: Dotted module name; names outside the engine namespace are
            nested under it.

    Returns:
        Logger instance.
    """
    if name != ENGINE_LOGGER and not name.startswith(ENGINE_LOGGER + "."):
        name = f"{ENGINE_LOGGER}.{name}"
    return logging.getLogger(name)


class LoggerMixin:
    """Provides a per-class self.logger attribute."""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, "_logger"):
            self._logger = logging.getLogger(
                f"{self.__class__.__module__}.{self.__class__.__name__}"
            )
        return self._logger
