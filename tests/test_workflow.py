from types import SimpleNamespace

import pytest

from campaign_inbox import workflow
from campaign_inbox.checkpointing import new_memory_checkpointer
from campaign_inbox.errors import NotConnectedError
from tests.google_fakes import FIXED_NOW


@pytest.fixture(autouse=True)
def frozen_time(monkeypatch):
    monkeypatch.setattr(workflow, "_utcnow", lambda: FIXED_NOW)


@pytest.fixture
def agent_calls(monkeypatch):
    """Replace the LLM agent; tests set `agent_calls.response` or `agent_calls.error`."""

    calls = SimpleNamespace(
        prompts=[], max_steps=[], thread_ids=[], response="Processed 2 campaign emails.", error=None
    )

    def fake_run(agent, prompt, *, max_steps, thread_id=None):
        calls.prompts.append(prompt)
        calls.max_steps.append(max_steps)
        calls.thread_ids.append(thread_id)
        if calls.error is not None:
            raise calls.error
        return calls.response

    monkeypatch.setattr(workflow, "get_campaign_agent", lambda: object())
    monkeypatch.setattr(workflow, "run_campaign_agent", fake_run)
    return calls


def test_process_emails_task_success(agent_calls):
    runtime = SimpleNamespace(context={"timezone": "America/Phoenix", "max_steps": 7, "thread_id": "t-1"})

    output = workflow.process_emails_task.func({}, runtime)

    assert output == {
        "agent_response": "Processed 2 campaign emails.",
        "processed_at": "2026-10-18T12:00:00.000Z",
        "success": True,
    }
    prompt = agent_calls.prompts[0]
    # 12:00 UTC is 05:00 in Phoenix, still the same calendar day
    assert "Today's date is: Sunday, October 18, 2026" in prompt
    assert '"AZCorpComm_Event"' in prompt
    assert "up to 50 emails" in prompt
    assert agent_calls.max_steps == [7]
    assert agent_calls.thread_ids == ["t-1:agent"]


def test_process_emails_task_uses_local_date(agent_calls, monkeypatch):
    monkeypatch.setattr(workflow, "_utcnow", lambda: FIXED_NOW.replace(hour=2))
    runtime = SimpleNamespace(context={"timezone": "America/Phoenix"})

    workflow.process_emails_task.func({}, runtime)

    assert "Saturday, October 17, 2026" in agent_calls.prompts[0]


def test_process_emails_task_reports_failure(agent_calls, caplog):
    agent_calls.error = NotConnectedError("google-mail", "Gmail not connected")

    with caplog.at_level("ERROR"):
        output = workflow.process_emails_task.func({}, None)

    assert output["success"] is False
    assert output["agent_response"] == "Error processing emails: Gmail not connected"
    assert output["processed_at"] == "2026-10-18T12:00:00.000Z"
    assert "Failed to process emails" in caplog.text
    assert agent_calls.max_steps == [20]
    assert agent_calls.thread_ids == [None]


def test_generate_summary_task_formats_report():
    state = {
        "agent_response": "Tagged 1 email.",
        "processed_at": "2026-10-18T12:00:00.000Z",
        "success": True,
    }

    output = workflow.generate_summary_task.func(state)

    assert output["overall_success"] is True
    assert output["completed_at"] == "2026-10-18T12:00:00.000Z"
    summary = output["summary"]
    assert "CAMPAIGN EMAIL PROCESSING REPORT" in summary
    assert "Processed at: 2026-10-18T12:00:00.000Z" in summary
    assert "Status: Successful" in summary
    assert "Tagged 1 email." in summary
    assert 'Look for emails tagged with "AZCorpComm_Event"' in summary


def test_format_summary_failed_status_keeps_braces():
    summary = workflow.format_summary("Error processing emails: {bad}", "2026-10-18T12:00:00.000Z", False)
    assert "Status: Failed" in summary
    assert "Error processing emails: {bad}" in summary


def test_run_workflow_end_to_end(agent_calls):
    graph = workflow.build_workflow(checkpointer=new_memory_checkpointer())

    result = workflow.run_workflow(thread_id="thread-e2e", timezone="America/Denver", max_steps=4, workflow=graph)

    assert result["overall_success"] is True
    assert "Processed 2 campaign emails." in result["summary"]
    assert result["completed_at"] == "2026-10-18T12:00:00.000Z"
    assert agent_calls.max_steps == [4]
    assert agent_calls.thread_ids == ["thread-e2e:agent"]

    snapshot = graph.get_state({"configurable": {"thread_id": "thread-e2e"}})
    assert snapshot.values["success"] is True
    assert snapshot.values["requested_at"] == "2026-10-18T12:00:00.000Z"


def test_run_workflow_reports_agent_failure(agent_calls):
    agent_calls.error = RuntimeError("model unavailable")
    graph = workflow.build_workflow(checkpointer=new_memory_checkpointer())

    result = workflow.run_workflow(workflow=graph)

    assert result["overall_success"] is False
    assert "Status: Failed" in result["summary"]
    assert "Error processing emails: model unavailable" in result["summary"]


def test_run_workflow_generates_thread_id(agent_calls, monkeypatch):
    seen = {}

    class _Graph:
        def invoke(self, state, config=None, context=None):
            seen.update(state=state, config=config, context=context)
            return {"summary": "s", "completed_at": "c", "overall_success": True}

    result = workflow.run_workflow(workflow=_Graph())

    thread_id = seen["config"]["configurable"]["thread_id"]
    assert thread_id.startswith("campaign-email-workflow-")
    assert seen["context"] == {"thread_id": thread_id}
    assert seen["state"] == {"requested_at": "2026-10-18T12:00:00.000Z"}
    assert result == {"summary": "s", "completed_at": "c", "overall_success": True}
