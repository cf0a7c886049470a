"""Two-step campaign email workflow.

process_emails asks the campaign agent to triage the inbox; generate_summary
formats its answer into the run report. The graph is compiled with a
checkpointer so an interrupted run resumes after the last completed step.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone as dt_timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from langgraph.func import task
from langgraph.graph import END, START, StateGraph
from langgraph.runtime import Runtime

from campaign_inbox.agent import get_campaign_agent, run_campaign_agent
from campaign_inbox.checkpointing import get_sqlite_checkpointer
from campaign_inbox.prompts import CAMPAIGN_LABEL, process_emails_prompt, summary_report_template
from campaign_inbox.runtime import extract_runtime_metadata
from campaign_inbox.schemas import (
    ProcessEmailsOutput,
    SummaryOutput,
    WorkflowContext,
    WorkflowState,
)
from campaign_inbox.tracing import AGENT_PROJECT, init_project, trace_stage
from campaign_inbox.utils import format_long_date, iso_now

logger = logging.getLogger(__name__)

WORKFLOW_ID = "campaign-email-workflow"
MAX_EMAILS = 50

init_project(AGENT_PROJECT)


def _utcnow() -> datetime:
    return datetime.now(dt_timezone.utc)


def agent_thread_id(thread_id: Optional[str]) -> Optional[str]:
    """Agent history thread for a workflow thread; kept apart from the workflow's own checkpoints."""
    return f"{thread_id}:agent" if thread_id else None


def _local_today(tz_name: str) -> str:
    try:
        tzinfo = ZoneInfo(tz_name)
    except ZoneInfoNotFoundError:
        logger.warning("Unknown timezone %r; using UTC for today's date", tz_name)
        tzinfo = dt_timezone.utc
    return format_long_date(_utcnow().astimezone(tzinfo))


@task
def process_emails_task(
    state: WorkflowState,
    runtime: Runtime[WorkflowContext],
) -> ProcessEmailsOutput:
    """
    Run the campaign agent over the inbox.

    Agent failures do not abort the workflow: they are logged and reported as
    `success=False` with the error message as the agent response.
    """

    tz_name, max_steps, thread_id, metadata = extract_runtime_metadata(runtime)
    logger.info("[Step 1] Starting campaign email processing (thread_id=%s)", thread_id)
    prompt = process_emails_prompt.format(
        today=_local_today(tz_name),
        label=CAMPAIGN_LABEL,
        max_emails=MAX_EMAILS,
    )

    with trace_stage("process-campaign-emails", inputs_summary=prompt, metadata=metadata) as handle:
        try:
            logger.info("[Step 1] Calling campaign email agent")
            agent_response = run_campaign_agent(
                get_campaign_agent(),
                prompt,
                max_steps=max_steps,
                thread_id=agent_thread_id(thread_id),
            )
        except Exception as exc:  # noqa: BLE001 - reported through the step output
            logger.exception("[Step 1] Failed to process emails")
            message = str(exc) or exc.__class__.__name__
            output: ProcessEmailsOutput = {
                "agent_response": f"Error processing emails: {message}",
                "processed_at": iso_now(_utcnow()),
                "success": False,
            }
        else:
            logger.info("[Step 1] Campaign email agent completed processing")
            output = {
                "agent_response": agent_response,
                "processed_at": iso_now(_utcnow()),
                "success": True,
            }
        if handle is not None:
            handle.set_outputs(output["agent_response"])
            handle.add_metadata(success=output["success"])
    return output


def process_emails(state: WorkflowState, runtime: Runtime[WorkflowContext]) -> ProcessEmailsOutput:
    return process_emails_task(state, runtime=runtime).result()


def format_summary(agent_response: str, processed_at: str, success: bool) -> str:
    return summary_report_template.format(
        processed_at=processed_at,
        status="Successful" if success else "Failed",
        agent_response=agent_response,
        label=CAMPAIGN_LABEL,
    )


@task
def generate_summary_task(state: WorkflowState) -> SummaryOutput:
    """Format step 1's result into the final report."""

    logger.info("[Step 2] Generating summary report")
    success = bool(state.get("success", False))
    summary = format_summary(
        agent_response=state.get("agent_response", ""),
        processed_at=state.get("processed_at", ""),
        success=success,
    )
    logger.info(summary)
    logger.info("[Step 2] Summary report generated")
    return {
        "summary": summary,
        "completed_at": iso_now(_utcnow()),
        "overall_success": success,
    }


def generate_summary(state: WorkflowState) -> SummaryOutput:
    return generate_summary_task(state).result()


def build_workflow(checkpointer: Any = None):
    """Compile the two-step graph; `checkpointer` defaults to the SQLite saver."""

    builder = (
        StateGraph(WorkflowState, context_schema=WorkflowContext)
        .add_node("process_emails", process_emails)
        .add_node("generate_summary", generate_summary)
        .add_edge(START, "process_emails")
        .add_edge("process_emails", "generate_summary")
        .add_edge("generate_summary", END)
    )
    if checkpointer is None:
        checkpointer = get_sqlite_checkpointer()
    return builder.compile(checkpointer=checkpointer, name=WORKFLOW_ID).with_config(durability="sync")


_WORKFLOW = None


def get_workflow():
    """Return the process-wide compiled workflow, building it on first use."""

    global _WORKFLOW
    if _WORKFLOW is None:
        _WORKFLOW = build_workflow()
    return _WORKFLOW


def run_workflow(
    *,
    thread_id: Optional[str] = None,
    timezone: Optional[str] = None,
    max_steps: Optional[int] = None,
    workflow: Any = None,
) -> SummaryOutput:
    """
    Run the workflow once and return the step 2 output.

    Parameters:
        thread_id: Checkpoint thread; reuse one to resume an interrupted run
            or to let the agent recall its earlier runs on this thread.
            A fresh id is generated when omitted.
        timezone: Timezone used for "today" in the agent prompt.
        max_steps: Budget of LLM turns for the agent.
        workflow: A compiled workflow (defaults to `get_workflow()`).
    """

    graph = workflow or get_workflow()
    thread_id = thread_id or f"{WORKFLOW_ID}-{uuid.uuid4()}"
    context: WorkflowContext = {"thread_id": thread_id}
    if timezone:
        context["timezone"] = timezone
    if max_steps:
        context["max_steps"] = max_steps

    logger.info("Starting %s (thread_id=%s)", WORKFLOW_ID, thread_id)
    state = graph.invoke(
        {"requested_at": iso_now(_utcnow())},
        config={"configurable": {"thread_id": thread_id}},
        context=context,
    )
    return {
        "summary": state.get("summary", ""),
        "completed_at": state.get("completed_at", ""),
        "overall_success": bool(state.get("overall_success", False)),
    }
