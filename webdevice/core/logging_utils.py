"""Logging setup for the webdevice command line.

Version: 0.1.0
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

LEVEL_ALIASES = {
    "CRITICAL": "CRITICAL",
    "ERROR": "ERROR",
    "WARN": "WARNING",
    "WARNING": "WARNING",
    "INFO": "INFO",
    "DEBUG": "DEBUG",
}


def normalize_log_level(level_name: str | None) -> str:
    """Return a normalized logging level name (defaults to INFO)."""
    if not level_name:
        return "INFO"
    return LEVEL_ALIASES.get(level_name.strip().upper(), "INFO")


def prepare_log_file(log_file: str | Path, reset_on_start: bool = True) -> None:
    """Create the log directory and, when ``reset_on_start``, drop the previous log."""
    if not log_file:
        return

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    if reset_on_start and log_path.exists():
        log_path.unlink()


def configure_logging(
    level_name: str | None,
    log_file: Optional[str | Path] = None,
    reset_on_start: bool = True,
) -> str:
    """Configure the root and ``webdevice`` loggers to the requested level.

    A file handler is attached when ``log_file`` is given. Without
    ``reset_on_start`` the handler appends to the existing file.

    Returns:
        The normalized level name effectively applied.
    """
    normalized = normalize_log_level(level_name)
    numeric_level = getattr(logging, normalized, logging.INFO)

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers:
        handler.setLevel(numeric_level)
    logging.getLogger("webdevice").setLevel(numeric_level)

    if log_file:
        try:
            log_path = Path(log_file)
            already_configured = any(
                isinstance(handler, logging.FileHandler)
                and getattr(handler, "baseFilename", None) == os.path.abspath(log_path)
                for handler in root_logger.handlers
            )
            if not already_configured:
                prepare_log_file(log_path, reset_on_start)

                file_handler = logging.FileHandler(log_path, encoding="utf-8")
                file_handler.setLevel(numeric_level)
                file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
                root_logger.addHandler(file_handler)
        except OSError as exc:  # pragma: no cover - logging setup must not abort the tool
            logging.getLogger(__name__).warning("Failed to attach file handler %s: %s", log_file, exc)

    return normalized
