"""File logging for the dashboard process.

The dashboard owns the terminal, so diagnostics go to a log file instead of
stdout/stderr.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from platformdirs import user_log_dir

_DEFAULT_LEVEL = os.getenv("DEVDASH_LOG_LEVEL", "INFO").upper()
DEFAULT_LOG_FILE = Path(user_log_dir("devdash", appauthor=False)) / "devdash.log"


def setup_logger(
    name: str = "devdash",
    level: str | int | None = None,
    log_file: str | os.PathLike[str] | None = None,
) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    resolved_level = level if level is not None else _DEFAULT_LEVEL
    logger.setLevel(resolved_level)

    path = Path(log_file) if log_file is not None else DEFAULT_LOG_FILE
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        # Unwritable log location: keep records away from the terminal.
        handler = logging.NullHandler()
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger
