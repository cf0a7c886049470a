from campaign_inbox.connectors.token_cache import (
    CredentialRecord,
    ResourceFamily,
    TokenCache,
    extract_access_token,
)
from campaign_inbox.connectors.clients import (
    ResourceClientFactory,
    get_default_client_factory,
    set_default_client_factory,
)

__all__ = [
    "CredentialRecord",
    "ResourceFamily",
    "TokenCache",
    "extract_access_token",
    "ResourceClientFactory",
    "get_default_client_factory",
    "set_default_client_factory",
]
