"""Checkpoint savers for the campaign workflow.

Runs are checkpointed per thread so a run that dies between process_emails
and generate_summary resumes at the summary step instead of re-running the
agent (which would create duplicate drafts and events).
"""

from __future__ import annotations

import atexit
import logging
import os
import sqlite3
from functools import lru_cache
from pathlib import Path
from typing import Optional

from langgraph.checkpoint.memory import MemorySaver
from langgraph.checkpoint.sqlite import SqliteSaver

from campaign_inbox.errors import ConfigurationError

logger = logging.getLogger(__name__)

CHECKPOINT_PATH_ENV = "CAMPAIGN_INBOX_CHECKPOINT_PATH"
SQLITE_TIMEOUT_ENV = "CAMPAIGN_INBOX_SQLITE_TIMEOUT"
DEFAULT_CHECKPOINT_PATH = Path.home() / ".campaign_inbox" / "checkpoints.sqlite"
DEFAULT_SQLITE_TIMEOUT_SECONDS = 30.0


def checkpoint_path(override: Optional[str] = None) -> Path:
    """Absolute checkpoint file location; the parent folder is created."""

    raw = override or os.getenv(CHECKPOINT_PATH_ENV)
    path = Path(raw).expanduser() if raw else DEFAULT_CHECKPOINT_PATH
    path = path if path.is_absolute() else Path.cwd() / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def sqlite_timeout_seconds() -> float:
    raw = os.getenv(SQLITE_TIMEOUT_ENV)
    if not raw:
        return DEFAULT_SQLITE_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid {SQLITE_TIMEOUT_ENV}={raw!r}; expected seconds") from None
    if timeout <= 0:
        raise ConfigurationError(f"{SQLITE_TIMEOUT_ENV} must be positive, got {raw!r}")
    return timeout


@lru_cache(maxsize=4)
def get_sqlite_checkpointer(path: Optional[str] = None) -> SqliteSaver:
    """Open (once per path) the SQLite saver used by the compiled workflow."""

    location = checkpoint_path(path)
    timeout = sqlite_timeout_seconds()
    conn = sqlite3.connect(str(location), check_same_thread=False, timeout=timeout)
    # WAL lets a second CLI run read checkpoints while another one writes
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(f"PRAGMA busy_timeout = {int(timeout * 1000)}")
    atexit.register(conn.close)
    logger.info("Workflow checkpoints stored in %s", location)
    return SqliteSaver(conn)


def new_memory_checkpointer() -> MemorySaver:
    return MemorySaver()
