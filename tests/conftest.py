#!/usr/bin/env python

import os
import sys
import tempfile

from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(src_path))

# Keep test runs from writing into the working tree's logs/ folder.
os.environ.setdefault(
    "CAMPAIGN_INBOX_LOG_PATH",
    str(Path(tempfile.gettempdir()) / "campaign_inbox_tests.log"),
)
os.environ.setdefault("LANGSMITH_TRACING", "false")

from tests.google_fakes import (  # noqa: E402
    FIXED_NOW,
    INVALID_JSON,
    FakeCalendarService,
    FakeGmailService,
    StaticClientFactory,
)


@pytest.fixture
def invalid_json():
    return INVALID_JSON


@pytest.fixture
def fixed_clock():
    """Mutable clock: set `fixed_clock.now` to move time."""

    class _Clock:
        now = FIXED_NOW

        def __call__(self):
            return self.now

    return _Clock()


@pytest.fixture
def gmail_service():
    return FakeGmailService()


@pytest.fixture
def calendar_service():
    return FakeCalendarService()


@pytest.fixture
def client_factory(gmail_service, calendar_service):
    return StaticClientFactory(gmail=gmail_service, calendar=calendar_service)


@pytest.fixture
def default_client_factory(client_factory):
    """Install the fake factory as the process default used by the LangChain tools."""

    from campaign_inbox.connectors.clients import set_default_client_factory

    set_default_client_factory(client_factory)
    try:
        yield client_factory
    finally:
        set_default_client_factory(None)
