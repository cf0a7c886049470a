"""Runtime context utilities shared by the workflow steps."""
from __future__ import annotations

import os
from typing import Any

from langgraph.runtime import Runtime

from campaign_inbox.schemas import WorkflowContext

_DEFAULT_TIMEZONE = os.getenv("CAMPAIGN_INBOX_TIMEZONE", "America/Phoenix")
DEFAULT_MAX_STEPS = 20


def extract_runtime_metadata(
    runtime: Runtime[WorkflowContext] | None,
) -> tuple[str, int, str | None, dict[str, Any]]:
    """
    Extract timezone, agent step budget, thread identifier and trace metadata from a Runtime's context.

    Missing runtime or context values fall back to the module defaults
    (`CAMPAIGN_INBOX_TIMEZONE` or America/Phoenix, 20 steps, no thread id).

    Returns:
        tuple[str, int, str | None, dict[str, Any]]: `(timezone, max_steps, thread_id, metadata)`
        where metadata holds the timezone and max_steps for tracing.
    """

    context = (runtime.context if runtime and runtime.context else {})  # type: ignore[attr-defined]
    timezone = context.get("timezone") or _DEFAULT_TIMEZONE
    try:
        max_steps = int(context.get("max_steps") or DEFAULT_MAX_STEPS)
    except (TypeError, ValueError):
        max_steps = DEFAULT_MAX_STEPS
    thread_id = context.get("thread_id")
    metadata = {"timezone": timezone, "max_steps": max_steps}
    return timezone, max_steps, thread_id, metadata
