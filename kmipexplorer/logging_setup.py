"""Logging configuration.

The terminal belongs to the TUI, so records go to a file under the platform
log directory (``--log-file`` overrides it). ``verbose`` lowers the level to
DEBUG.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

APP_NAME = "kmipexplorer"
LOG_FILENAME = "kmipexplorer.log"
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"

_handler: logging.Handler | None = None


def default_log_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def setup_logging(log_file: str | Path | None = None, verbose: bool = False) -> Path | None:
    """Attach a file handler to the package logger and return its path.

    Calling again replaces the previous handler. When the log file cannot be
    opened, logging stays disabled and ``None`` is returned.
    """
    global _handler
    logger = logging.getLogger(APP_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler.close()
        _handler = None

    path = Path(log_file) if log_file else default_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        logger.addHandler(logging.NullHandler())
        return None

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    level = logging.DEBUG if verbose else logging.INFO
    handler.setLevel(level)
    logger.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
    _handler = handler
    return path


__all__ = ["APP_NAME", "LOG_FORMAT", "default_log_path", "setup_logging"]
