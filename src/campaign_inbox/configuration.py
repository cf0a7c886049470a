from __future__ import annotations

import os
from dataclasses import dataclass

from langchain.chat_models import init_chat_model

from campaign_inbox.errors import ConfigurationError

_DEFAULT_MODEL = "claude-sonnet-4-5"
_DEFAULT_PROVIDER = "anthropic"

_BASE_URL_ENV = "AI_INTEGRATIONS_ANTHROPIC_BASE_URL"
_API_KEY_ENV = "AI_INTEGRATIONS_ANTHROPIC_API_KEY"

CONNECTORS_HOSTNAME_ENV = "REPLIT_CONNECTORS_HOSTNAME"
REPL_IDENTITY_ENV = "REPL_IDENTITY"
RENEWAL_ENV = "WEB_REPL_RENEWAL"
_CONNECTORS_TIMEOUT_ENV = "CONNECTORS_TIMEOUT_SECONDS"


@dataclass(frozen=True)
class ModelSpec:
    provider: str
    model: str

    @property
    def identifier(self) -> str:
        return f"{self.provider}:{self.model}" if self.provider else self.model


def normalize_model_spec(model: str | None = None, *, model_provider: str | None = None) -> ModelSpec:
    """
    Resolve the chat model and provider for the agent.

    `model` may carry a `provider:model` prefix, which wins over
    `model_provider`. Empty values fall back to `CAMPAIGN_INBOX_MODEL` /
    `CAMPAIGN_INBOX_MODEL_PROVIDER`, then to Claude Sonnet on Anthropic.
    """

    default_model = os.environ.get("CAMPAIGN_INBOX_MODEL") or _DEFAULT_MODEL
    name = (model or "").strip() or default_model
    provider = model_provider or os.environ.get("CAMPAIGN_INBOX_MODEL_PROVIDER", _DEFAULT_PROVIDER)

    prefix, sep, rest = name.partition(":")
    if sep:
        if prefix.strip():
            provider = prefix.strip()
        name = rest.strip() or _DEFAULT_MODEL

    return ModelSpec(provider=provider or "", model=name)


def format_model_identifier(model: str | None = None, *, provider: str | None = None) -> str:
    """Produce a provider-prefixed model identifier suitable for logging."""

    spec = normalize_model_spec(model, model_provider=provider)
    return spec.identifier


def get_llm(temperature: float = 0.0, **kwargs):
    """
    Create a LangChain chat model for the campaign agent.

    The model provider's base URL and key are read from
    `AI_INTEGRATIONS_ANTHROPIC_BASE_URL` / `AI_INTEGRATIONS_ANTHROPIC_API_KEY`
    when the resolved provider is Anthropic and the caller did not pass them.

    Parameters:
        temperature (float): Sampling temperature for the model.
        **kwargs: Forwarded to LangChain's `init_chat_model`. Recognised overrides:
              - model: explicit model string (may include a provider prefix)
              - model_provider: explicit provider name

    Returns:
        BaseChatModel: A configured LangChain chat model instance.
    """

    raw_model = kwargs.pop("model", None)
    provider_override = kwargs.pop("model_provider", None)
    spec = normalize_model_spec(raw_model, model_provider=provider_override)

    if spec.provider == "anthropic":
        base_url = os.getenv(_BASE_URL_ENV)
        api_key = os.getenv(_API_KEY_ENV)
        if base_url:
            kwargs.setdefault("base_url", base_url)
        if api_key:
            kwargs.setdefault("api_key", api_key)

    return init_chat_model(
        spec.model,
        model_provider=spec.provider,
        temperature=temperature,
        **kwargs,
    )


@dataclass(frozen=True)
class ConnectorSettings:
    """Where and as whom to ask the connector registry for access tokens."""

    hostname: str
    identity_header: str
    timeout_seconds: float | None = None

    @property
    def base_url(self) -> str:
        host = self.hostname.rstrip("/")
        if host.startswith("http://") or host.startswith("https://"):
            return host
        return f"https://{host}"

    @classmethod
    def from_env(cls, environ=None) -> "ConnectorSettings":
        """
        Read connector settings from the environment.

        The identity header is `repl <REPL_IDENTITY>` when a repl identity is
        present, otherwise `depl <WEB_REPL_RENEWAL>`.

        Raises:
            ConfigurationError: when neither identity source or the hostname is set.
        """

        env = os.environ if environ is None else environ
        identity = env.get(REPL_IDENTITY_ENV)
        renewal = env.get(RENEWAL_ENV)
        if identity:
            identity_header = f"repl {identity}"
        elif renewal:
            identity_header = f"depl {renewal}"
        else:
            raise ConfigurationError(
                f"Connector identity not found: set {REPL_IDENTITY_ENV} or {RENEWAL_ENV}"
            )

        hostname = (env.get(CONNECTORS_HOSTNAME_ENV) or "").strip()
        if not hostname:
            raise ConfigurationError(f"{CONNECTORS_HOSTNAME_ENV} is not set")

        return cls(
            hostname=hostname,
            identity_header=identity_header,
            timeout_seconds=_parse_timeout(env.get(_CONNECTORS_TIMEOUT_ENV)),
        )


def _parse_timeout(raw_value: str | None) -> float | None:
    if not raw_value:
        return None
    try:
        timeout = float(raw_value)
    except ValueError:
        raise ConfigurationError(
            f"Invalid {_CONNECTORS_TIMEOUT_ENV}={raw_value!r}; expected seconds"
        ) from None
    return timeout if timeout > 0 else None
