"""Logging configuration helpers."""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Mapping

LOGGER_NAME = "backup_and_sync"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    *,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure a stdout handler, plus a rotating file handler when ``log_file`` is set.
    Safe to call multiple times; existing handlers are reused.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    # Log to stdout alongside the wrapped tools' output.
    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_file),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def format_fields(fields: Mapping[str, object]) -> str:
    return " ".join(f"{key}={value}" for key, value in fields.items())


__all__ = ["LOGGER_NAME", "format_fields", "setup_logging"]
