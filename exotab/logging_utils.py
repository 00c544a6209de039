"""
Logging helpers.

Modules log through ``logging.getLogger(__name__)``; this module only wires
handlers for applications that embed exotab and records pipeline actions
(load, clean, train) on a dedicated ``data_actions`` logger.
"""

import logging
import os
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Optional

from .config import get_settings

data_logger = logging.getLogger("data_actions")

FILE_FORMAT = "%(asctime)s [%(levelname)8s] %(name)s: %(message)s [%(filename)s:%(lineno)d]"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def log_data_action(action: str, success: bool = True, details: Optional[str] = None):
    """
    Record one pipeline action.

    Args:
        action: pipeline stage, e.g. ``"load"`` or ``"train"``
        success: failures are logged at ERROR, successes at INFO
        details: free-form summary such as row counts
    """
    parts = [f"Action: {action}"]
    if details:
        parts.append(f"Details: {details}")
    parts.append("Status: SUCCESS" if success else "Status: FAILED")
    data_logger.log(logging.INFO if success else logging.ERROR, " | ".join(parts))


def _file_handler(log_file: str, rotation_type: str, max_bytes: int, backup_count: int) -> logging.Handler:
    folder = os.path.dirname(log_file)
    if folder:
        os.makedirs(folder, exist_ok=True)
    if rotation_type.lower() in ("time", "timed"):
        return TimedRotatingFileHandler(log_file, when="midnight", backupCount=backup_count, encoding="utf-8")
    return RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")


def setup_logging(
    log_file: Optional[str] = None,
    log_level: Optional[str] = None,
    rotation_type: Optional[str] = None,
    max_bytes: Optional[int] = None,
    backup_count: Optional[int] = None,
    console_log_level: Optional[str] = None,
) -> None:
    """
    Install a console handler and, when a log file is configured, a rotating
    file handler on the root logger. Unset arguments come from ``get_settings()``.
    Calling it again replaces the handlers instead of stacking them.
    """
    settings = get_settings()
    log_file = log_file if log_file is not None else settings.LOG_FILE
    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)
    console_level = getattr(logging, (console_log_level or settings.CONSOLE_LOG_LEVEL).upper(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if log_file:
        try:
            file_handler = _file_handler(
                log_file,
                rotation_type or settings.LOG_ROTATION_TYPE,
                max_bytes or settings.LOG_MAX_BYTES,
                backup_count or settings.LOG_BACKUP_COUNT,
            )
        except OSError as e:
            root.warning(f"File logging to {log_file} disabled: {e}")
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            root.addHandler(file_handler)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info(f"Logging initialized (file={log_file}, level={logging.getLevelName(level)})")
