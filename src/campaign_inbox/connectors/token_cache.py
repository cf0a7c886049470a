"""Lazy, expiry-aware access-token cache backed by the connector registry.

One credential record is kept per resource family. A record is only ever
stored after a successful fetch and is replaced whole on refresh. The cache
holds no lock: concurrent misses for the same family may each fetch, and the
last successful fetch wins.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

import requests

from campaign_inbox.configuration import ConnectorSettings
from campaign_inbox.errors import NotConnectedError, ProviderError

logger = logging.getLogger(__name__)

CONNECTION_PATH = "/api/v2/connection"
IDENTITY_HEADER = "X_REPLIT_TOKEN"


class ResourceFamily(str, enum.Enum):
    """External API domain; the value is the connector name."""

    MAIL = "google-mail"
    CALENDAR = "google-calendar"

    @property
    def connector_name(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    ResourceFamily.MAIL: "Gmail",
    ResourceFamily.CALENDAR: "Google Calendar",
}


@dataclass(frozen=True)
class CredentialRecord:
    access_token: str
    expires_at: Optional[datetime] = None

    def is_fresh(self, now: datetime) -> bool:
        """True when the record carries an expiry strictly after `now`."""
        return self.expires_at is not None and self.expires_at > now


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_expiry(value: Any) -> Optional[datetime]:
    """Parse the connector's ISO timestamp; naive values are treated as UTC."""

    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.warning("Ignoring unparseable connector expires_at=%r", value)
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def extract_access_token(item: Mapping[str, Any] | None) -> Optional[str]:
    """Return `settings.access_token`, else `settings.oauth.credentials.access_token`."""

    if not item:
        return None
    settings = item.get("settings") or {}
    token = settings.get("access_token")
    if token:
        return token
    oauth = settings.get("oauth") or {}
    credentials = oauth.get("credentials") or {}
    return credentials.get("access_token") or None


class TokenCache:
    """Per-family credential records with fetch-on-miss.

    Parameters:
        settings: Fixed connector settings. When omitted, `settings_loader` is
            called on every cache miss so the environment is only read (and
            validated) at the point of use.
        session: HTTP session used for the connector registry request.
        clock: Returns the current aware datetime; injectable for tests.
    """

    def __init__(
        self,
        settings: ConnectorSettings | None = None,
        *,
        session: requests.Session | None = None,
        clock: Callable[[], datetime] | None = None,
        settings_loader: Callable[[], ConnectorSettings] = ConnectorSettings.from_env,
    ):
        self._settings = settings
        self._settings_loader = settings_loader
        self._session = session or requests.Session()
        self._clock = clock or _utcnow
        self._records: Dict[ResourceFamily, CredentialRecord] = {}

    def get_access_token(self, family: ResourceFamily) -> str:
        family = ResourceFamily(family)
        record = self._records.get(family)
        if record is not None and record.is_fresh(self._clock()):
            return record.access_token

        record = self._fetch(family)
        self._records[family] = record
        logger.info(
            "Refreshed %s access token (expires_at=%s)",
            family.display_name,
            record.expires_at.isoformat() if record.expires_at else "unknown",
        )
        return record.access_token

    def peek(self, family: ResourceFamily) -> Optional[CredentialRecord]:
        return self._records.get(ResourceFamily(family))

    def invalidate(self, family: ResourceFamily | None = None) -> None:
        if family is None:
            self._records.clear()
        else:
            self._records.pop(ResourceFamily(family), None)

    def _fetch(self, family: ResourceFamily) -> CredentialRecord:
        try:
            settings = self._settings or self._settings_loader()
        except Exception:
            logger.exception("Connector configuration missing for %s", family.display_name)
            raise

        url = settings.base_url + CONNECTION_PATH
        params = {"include_secrets": "true", "connector_names": family.connector_name}
        headers = {"Accept": "application/json", IDENTITY_HEADER: settings.identity_header}

        try:
            response = self._session.get(
                url,
                params=params,
                headers=headers,
                timeout=settings.timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.exception("Connector request failed for %s", family.display_name)
            raise ProviderError(
                f"Connector request for {family.connector_name} failed: {exc}"
            ) from exc

        if not response.ok:
            logger.error(
                "Connector registry returned HTTP %s for %s",
                response.status_code,
                family.display_name,
            )
            raise ProviderError(
                f"Connector registry returned HTTP {response.status_code} for {family.connector_name}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            logger.exception("Connector registry returned invalid JSON for %s", family.display_name)
            raise ProviderError(
                f"Connector registry returned invalid JSON for {family.connector_name}"
            ) from exc

        items = payload.get("items") if isinstance(payload, dict) else None
        item = items[0] if items else None
        token = extract_access_token(item)
        if not token:
            logger.error("No usable access token for %s", family.display_name)
            raise NotConnectedError(family)

        settings_block = item.get("settings") or {}
        return CredentialRecord(
            access_token=token,
            expires_at=parse_expiry(settings_block.get("expires_at")),
        )
