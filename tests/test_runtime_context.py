from types import SimpleNamespace

from campaign_inbox.runtime import DEFAULT_MAX_STEPS, extract_runtime_metadata


def test_extract_runtime_metadata_defaults():
    timezone, max_steps, thread_id, metadata = extract_runtime_metadata(None)
    assert timezone == "America/Phoenix"
    assert max_steps == DEFAULT_MAX_STEPS == 20
    assert thread_id is None
    assert metadata == {"timezone": timezone, "max_steps": 20}


def test_extract_runtime_metadata_reads_context():
    runtime = SimpleNamespace(
        context={"timezone": "America/Denver", "max_steps": 5, "thread_id": "thread-123"}
    )
    timezone, max_steps, thread_id, metadata = extract_runtime_metadata(runtime)
    assert timezone == "America/Denver"
    assert max_steps == 5
    assert thread_id == "thread-123"
    assert metadata == {"timezone": "America/Denver", "max_steps": 5}


def test_extract_runtime_metadata_ignores_bad_step_budget():
    runtime = SimpleNamespace(context={"max_steps": "many"})
    _, max_steps, _, _ = extract_runtime_metadata(runtime)
    assert max_steps == DEFAULT_MAX_STEPS
