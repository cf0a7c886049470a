"""Exception types raised by the connector and tool layers."""

from __future__ import annotations


class CampaignInboxError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(CampaignInboxError):
    """Required environment configuration is missing (operator action needed)."""


class NotConnectedError(CampaignInboxError):
    """The connector exists but did not yield a usable access token."""

    def __init__(self, family, message: str | None = None):
        self.family = family
        display = getattr(family, "display_name", str(family))
        super().__init__(message or f"{display} not connected")


class ProviderError(CampaignInboxError):
    """A remote call made by this layer failed."""

    def __init__(self, message: str, *, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


__all__ = [
    "CampaignInboxError",
    "ConfigurationError",
    "NotConnectedError",
    "ProviderError",
]
