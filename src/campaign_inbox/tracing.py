"""Utilities for consistent LangSmith tracing output."""
from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from langsmith.run_helpers import get_current_run_tree, trace

from campaign_inbox import version as CAMPAIGN_INBOX_VERSION

logger = logging.getLogger(__name__)

_TRACE_TIMEZONE_NAME = os.getenv("CAMPAIGN_INBOX_TRACE_TIMEZONE", "America/Phoenix")


def _project_with_date(base: str) -> str:
    """
    Append the current date (in the trace timezone) to a base project identifier.

    `prefix:suffix` becomes `prefix-SUFFIX-YYYYMMDD`; anything else becomes `base-YYYYMMDD`.
    Unknown timezones fall back to UTC.
    """
    try:
        tzinfo = ZoneInfo(_TRACE_TIMEZONE_NAME)
    except ZoneInfoNotFoundError:
        logger.warning(
            "Unknown CAMPAIGN_INBOX_TRACE_TIMEZONE=%r; falling back to UTC",
            _TRACE_TIMEZONE_NAME,
        )
        tzinfo = timezone.utc

    today = datetime.now(tzinfo).strftime("%Y%m%d")
    prefix, sep, suffix = base.partition(":")
    if sep:
        return f"{prefix}-{suffix.upper()}-{today}"
    return f"{base}-{today}"


def _agent_project_name() -> str:
    override = os.getenv("CAMPAIGN_INBOX_TRACE_PROJECT")
    if override:
        return _project_with_date(override)
    return _project_with_date("campaign-inbox:workflow")


AGENT_PROJECT = _agent_project_name()


def init_project(project: str | None) -> None:
    """Initialise stable LangSmith/LangChain project settings."""

    if not project:
        return

    os.environ.setdefault("LANGSMITH_PROJECT", project)
    os.environ.setdefault("LANGCHAIN_PROJECT", project)


def _grid_text(text: str | None) -> str:
    """Return a safe, non-empty string for LangSmith grid cells."""

    value = (text or "").strip()
    return value if value else "[n/a]"


def _shorten(text: str, limit: int) -> str:
    text = " ".join(str(text).split())
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 3)] + "..."


def _dedupe_preserve_order(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


def default_trace_tags(extra: Sequence[str] | None = None) -> list[str]:
    base = ["campaign-inbox", f"v{CAMPAIGN_INBOX_VERSION}"]
    return _dedupe_preserve_order([*base, *(extra or [])])


def summarize_tool_call_for_grid(name: str, args: Any) -> str:
    """One-line `[tool] name key=value ...` summary; long values are shortened."""

    parts = [f"[tool] {name}"]
    if isinstance(args, Mapping):
        for key, value in args.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                parts.append(f"{key}={len(value)}")
            else:
                parts.append(f"{key}={_shorten(value, 80)}")
    elif args:
        parts.append(_shorten(args, 160))
    return " ".join(parts)


@dataclass
class TraceRunHandle:
    """Helper allowing steps to summarise their outputs."""

    _ctx: Any
    _run: Any
    _outputs_summary: str | None = None
    _metadata: dict[str, Any] = field(default_factory=dict)

    def set_outputs(self, summary: str | None) -> None:
        self._outputs_summary = summary

    def add_metadata(self, **values: Any) -> None:
        self._metadata.update(values)

    def _finish(self, error: BaseException | None = None) -> None:
        if self._metadata:
            self._run.add_metadata(self._metadata)
        if error is None and self._outputs_summary is not None:
            self._run.end(outputs={"summary": _grid_text(self._outputs_summary)})
        if error is None:
            self._ctx.__exit__(None, None, None)
        else:
            self._ctx.__exit__(type(error), error, error.__traceback__)


@contextmanager
def trace_stage(
    name: str,
    *,
    run_type: str = "chain",
    inputs_summary: str | None = None,
    tags: Sequence[str] | None = None,
    metadata: Mapping[str, Any] | None = None,
):
    """Create a LangSmith child run for a logical stage.

    Yields a :class:`TraceRunHandle` when a parent run is active; otherwise ``None``.
    """

    parent = get_current_run_tree()
    if not parent:
        yield None
        return

    ctx = trace(
        name,
        run_type=run_type,
        inputs={"summary": _grid_text(inputs_summary)},
        metadata=dict(metadata or {}),
        tags=default_trace_tags(tags),
        parent=parent,
    )
    run = ctx.__enter__()
    handle = TraceRunHandle(ctx, run)
    try:
        yield handle
    except BaseException as exc:
        handle._finish(error=exc)
        raise
    else:
        handle._finish()
