"""Logging setup shared by the workflow, the agent and the Google tools."""

from __future__ import annotations

import logging
import os
from pathlib import Path

__all__ = ["setup_logging", "LOG_FORMAT"]

LOG_PATH_ENV = "CAMPAIGN_INBOX_LOG_PATH"
LOG_LEVEL_ENV = "CAMPAIGN_INBOX_LOG_LEVEL"
DEFAULT_LOG_PATH = "logs/campaign_inbox.log"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Noisy HTTP client loggers that otherwise flood the run log at INFO
_QUIET_LOGGERS = ("googleapiclient.discovery", "urllib3", "httpx")


def _parse_level(value: str | None) -> int:
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _file_handler_for(root: logging.Logger, path: Path) -> logging.FileHandler | None:
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename).resolve() == path:
            return handler
    return None


def setup_logging(log_path: str | None = None, level: str | None = None) -> Path:
    """Route package logs to a file (and stderr when nothing else is configured).

    Safe to call repeatedly: a file handler is attached once per path.
    Returns the resolved log path so the CLI can print where a run was recorded.
    """

    log_level = _parse_level(level or os.getenv(LOG_LEVEL_ENV))
    path = Path(log_path or os.getenv(LOG_PATH_ENV, DEFAULT_LOG_PATH)).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=log_level, format=LOG_FORMAT)
    if root.level == logging.NOTSET or root.level > log_level:
        root.setLevel(log_level)

    if _file_handler_for(root, path) is None:
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    return path
