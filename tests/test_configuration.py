"""Tests for model routing and connector settings."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from campaign_inbox.configuration import (
    ConnectorSettings,
    format_model_identifier,
    get_llm,
    normalize_model_spec,
)
from campaign_inbox.errors import ConfigurationError


def test_normalize_model_spec_defaults_to_anthropic(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CAMPAIGN_INBOX_MODEL", raising=False)
    monkeypatch.delenv("CAMPAIGN_INBOX_MODEL_PROVIDER", raising=False)
    spec = normalize_model_spec()
    assert spec.provider == "anthropic"
    assert spec.model == "claude-sonnet-4-5"
    assert format_model_identifier() == "anthropic:claude-sonnet-4-5"


def test_normalize_model_spec_prefixed_provider(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CAMPAIGN_INBOX_MODEL_PROVIDER", raising=False)
    spec = normalize_model_spec("openai:gpt-4.1")
    assert spec.provider == "openai"
    assert spec.model == "gpt-4.1"


def test_get_llm_reads_integration_endpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: dict[str, object] = {}

    def _fake_init(model: str, **kwargs):
        calls["model"] = model
        calls.update(kwargs)
        return object()

    monkeypatch.delenv("CAMPAIGN_INBOX_MODEL", raising=False)
    monkeypatch.delenv("CAMPAIGN_INBOX_MODEL_PROVIDER", raising=False)
    monkeypatch.setenv("AI_INTEGRATIONS_ANTHROPIC_BASE_URL", "https://proxy.example/anthropic")
    monkeypatch.setenv("AI_INTEGRATIONS_ANTHROPIC_API_KEY", "sk-test")
    with patch("campaign_inbox.configuration.init_chat_model", side_effect=_fake_init):
        get_llm(temperature=0.2, max_tokens=512)

    assert calls["model"] == "claude-sonnet-4-5"
    assert calls["model_provider"] == "anthropic"
    assert calls["temperature"] == 0.2
    assert calls["max_tokens"] == 512
    assert calls["base_url"] == "https://proxy.example/anthropic"
    assert calls["api_key"] == "sk-test"


def test_get_llm_explicit_kwargs_win(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: dict[str, object] = {}

    def _fake_init(model: str, **kwargs):
        calls.update(kwargs)
        return object()

    monkeypatch.setenv("AI_INTEGRATIONS_ANTHROPIC_API_KEY", "sk-env")
    with patch("campaign_inbox.configuration.init_chat_model", side_effect=_fake_init):
        get_llm(model="anthropic:claude-sonnet-4-5", api_key="sk-explicit")

    assert calls["api_key"] == "sk-explicit"


def test_connector_settings_prefers_repl_identity() -> None:
    settings = ConnectorSettings.from_env(
        {
            "REPLIT_CONNECTORS_HOSTNAME": "connectors.example",
            "REPL_IDENTITY": "id-1",
            "WEB_REPL_RENEWAL": "renew-1",
        }
    )
    assert settings.identity_header == "repl id-1"
    assert settings.base_url == "https://connectors.example"
    assert settings.timeout_seconds is None


def test_connector_settings_falls_back_to_renewal() -> None:
    settings = ConnectorSettings.from_env(
        {
            "REPLIT_CONNECTORS_HOSTNAME": "http://localhost:8080/",
            "WEB_REPL_RENEWAL": "renew-1",
            "CONNECTORS_TIMEOUT_SECONDS": "7.5",
        }
    )
    assert settings.identity_header == "depl renew-1"
    assert settings.base_url == "http://localhost:8080"
    assert settings.timeout_seconds == 7.5


@pytest.mark.parametrize(
    "environ",
    [
        {"REPLIT_CONNECTORS_HOSTNAME": "connectors.example"},
        {"REPL_IDENTITY": "id-1"},
        {"REPL_IDENTITY": "id-1", "REPLIT_CONNECTORS_HOSTNAME": "  "},
        {
            "REPL_IDENTITY": "id-1",
            "REPLIT_CONNECTORS_HOSTNAME": "connectors.example",
            "CONNECTORS_TIMEOUT_SECONDS": "soon",
        },
    ],
)
def test_connector_settings_rejects_incomplete_environment(environ) -> None:
    with pytest.raises(ConfigurationError):
        ConnectorSettings.from_env(environ)
