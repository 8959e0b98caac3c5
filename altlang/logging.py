"""Logging utilities for altlang conversions."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "altlang"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the altlang hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def log_at(logger: logging.Logger, level: int, location: object, message: str) -> str:
    """Log ``message`` attributed to a source location and return the final text."""
    text = f"{location}: {message}" if location is not None else message
    logger.log(level, text)
    return text


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the altlang logger with console output and optional file sink.

    ``quiet`` keeps only warnings and errors on the console, which is what
    document builds usually want: every diagnostic the converter raises about
    a listing or fragment is a warning or an error.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[altlang] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger", "log_at"]
