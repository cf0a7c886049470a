import pytest

from campaign_inbox import tracing


def test_grid_text_fallback():
    assert tracing._grid_text("hello") == "hello"
    assert tracing._grid_text("  ") == "[n/a]"
    assert tracing._grid_text(None) == "[n/a]"


def test_summarize_tool_call_for_grid_draft():
    args = {
        "thread_id": "t-1",
        "to": "ann@example.org",
        "subject": "Re: Town hall",
        "body": "Thank you " * 40,
        "in_reply_to": None,
    }
    summary = tracing.summarize_tool_call_for_grid("create_draft_reply_tool", args)
    assert summary.startswith("[tool] create_draft_reply_tool")
    assert "to=ann@example.org" in summary
    assert "in_reply_to" not in summary
    assert "{" not in summary and "}" not in summary
    body_part = summary.split("body=", 1)[1]
    assert len(body_part) <= 80


def test_summarize_tool_call_for_grid_counts_lists():
    summary = tracing.summarize_tool_call_for_grid("add_label_to_email_tool", {"ids": ["a", "b", "c"]})
    assert summary == "[tool] add_label_to_email_tool ids=3"


def test_project_with_date_formats_prefix(monkeypatch):
    monkeypatch.setattr(tracing, "_TRACE_TIMEZONE_NAME", "UTC")
    name = tracing._project_with_date("campaign-inbox:workflow")
    assert name.startswith("campaign-inbox-WORKFLOW-")
    assert len(name.rsplit("-", 1)[1]) == 8


def test_init_project_sets_defaults(monkeypatch):
    monkeypatch.delenv("LANGSMITH_PROJECT", raising=False)
    monkeypatch.delenv("LANGCHAIN_PROJECT", raising=False)

    tracing.init_project("campaign-inbox-test")

    assert tracing.os.environ["LANGSMITH_PROJECT"] == "campaign-inbox-test"
    assert tracing.os.environ["LANGCHAIN_PROJECT"] == "campaign-inbox-test"


@pytest.mark.parametrize(
    "flag",
    ["LANGSMITH_HIDE_INPUTS", "LANGSMITH_HIDE_OUTPUTS", "LANGCHAIN_HIDE_INPUTS", "LANGCHAIN_HIDE_OUTPUTS"],
)
def test_init_project_keeps_privacy_flags(monkeypatch, flag):
    monkeypatch.setenv(flag, "true")

    tracing.init_project("campaign-inbox-test")

    assert tracing.os.environ[flag] == "true"


def test_workflow_project_setup_keeps_privacy_flags(monkeypatch):
    from campaign_inbox import workflow

    monkeypatch.setenv("LANGSMITH_HIDE_OUTPUTS", "true")
    workflow.init_project(workflow.AGENT_PROJECT)

    assert tracing.os.environ["LANGSMITH_HIDE_OUTPUTS"] == "true"


def test_default_trace_tags_dedupes():
    tags = tracing.default_trace_tags(["campaign-inbox", "gmail"])
    assert tags[0] == "campaign-inbox"
    assert tags.count("campaign-inbox") == 1
    assert tags[-1] == "gmail"


def test_trace_stage_without_parent_yields_none(monkeypatch):
    monkeypatch.setattr(tracing, "get_current_run_tree", lambda: None)
    with tracing.trace_stage("process-campaign-emails", inputs_summary="x") as handle:
        assert handle is None


def test_trace_stage_records_outputs_on_parent(monkeypatch):
    events = []

    class _Run:
        def add_metadata(self, metadata):
            events.append(("metadata", metadata))

        def end(self, outputs=None):
            events.append(("end", outputs))

    class _Ctx:
        def __init__(self, name, **kwargs):
            events.append(("start", name, kwargs["inputs"], kwargs["run_type"]))

        def __enter__(self):
            return _Run()

        def __exit__(self, exc_type, exc, tb):
            events.append(("exit", exc_type))
            return False

    monkeypatch.setattr(tracing, "get_current_run_tree", lambda: object())
    monkeypatch.setattr(tracing, "trace", _Ctx)

    with tracing.trace_stage("list_emails_tool", run_type="tool", inputs_summary="[tool] list_emails_tool") as handle:
        handle.set_outputs("2 emails")
        handle.add_metadata(success=True)

    assert events[0] == ("start", "list_emails_tool", {"summary": "[tool] list_emails_tool"}, "tool")
    assert ("metadata", {"success": True}) in events
    assert ("end", {"summary": "2 emails"}) in events
    assert events[-1] == ("exit", None)


def test_trace_stage_propagates_errors(monkeypatch):
    exits = []

    class _Ctx:
        def __init__(self, name, **kwargs):
            pass

        def __enter__(self):
            return object()

        def __exit__(self, exc_type, exc, tb):
            exits.append(exc_type)
            return False

    monkeypatch.setattr(tracing, "get_current_run_tree", lambda: object())
    monkeypatch.setattr(tracing, "trace", _Ctx)

    with pytest.raises(RuntimeError):
        with tracing.trace_stage("step"):
            raise RuntimeError("boom")
    assert exits == [RuntimeError]
