"""
Platform integrations.

StreamProvider is the contract the aggregator relies on; TwitchClient,
YouTubeClient and KickClient are the concrete platforms.
"""

from .base import (
    HttpStreamProvider,
    ProviderConfigError,
    ProviderError,
    ProviderResponseError,
    ProviderSchemaError,
    ProviderTransportError,
    StreamProvider,
    TokenExchangeError,
)
from .auth import ClientCredentialsProvider, TokenCache
from .kick import KickClient
from .twitch import TwitchClient
from .youtube import YouTubeClient

__all__ = [
    "StreamProvider",
    "HttpStreamProvider",
    "ClientCredentialsProvider",
    "TokenCache",
    "TwitchClient",
    "YouTubeClient",
    "KickClient",
    "ProviderError",
    "ProviderConfigError",
    "ProviderTransportError",
    "ProviderResponseError",
    "ProviderSchemaError",
    "TokenExchangeError",
]
