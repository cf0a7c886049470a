from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from campaign_inbox.connectors.token_cache import ResourceFamily, TokenCache

logger = logging.getLogger(__name__)

# (service name, API version) per family
API_SURFACES = {
    ResourceFamily.MAIL: ("gmail", "v1"),
    ResourceFamily.CALENDAR: ("calendar", "v3"),
}


class ResourceClientFactory:
    """Builds Google API handles authorised with the cached bearer token.

    No refresh token is attached: when a token expires the next call goes
    back through the token cache, which re-acquires it from the connector.
    """

    def __init__(
        self,
        token_cache: TokenCache | None = None,
        *,
        build_fn: Callable[..., Any] = build,
    ):
        self.token_cache = token_cache or TokenCache()
        self._build = build_fn

    def get_client(self, family: ResourceFamily) -> Any:
        family = ResourceFamily(family)
        access_token = self.token_cache.get_access_token(family)
        service_name, version = API_SURFACES[family]
        credentials = Credentials(token=access_token)
        logger.debug("Building %s %s client", service_name, version)
        return self._build(
            service_name,
            version,
            credentials=credentials,
            cache_discovery=False,
        )

    def gmail(self) -> Any:
        return self.get_client(ResourceFamily.MAIL)

    def calendar(self) -> Any:
        return self.get_client(ResourceFamily.CALENDAR)


_DEFAULT_FACTORY: Optional[ResourceClientFactory] = None


def get_default_client_factory() -> ResourceClientFactory:
    """Return the process-wide factory, creating it on first use."""

    global _DEFAULT_FACTORY
    if _DEFAULT_FACTORY is None:
        _DEFAULT_FACTORY = ResourceClientFactory()
    return _DEFAULT_FACTORY


def set_default_client_factory(factory: ResourceClientFactory | None) -> None:
    """Replace (or with None, reset) the process-wide factory."""

    global _DEFAULT_FACTORY
    _DEFAULT_FACTORY = factory
