# streamrank/providers/auth.py
"""
OAuth client-credentials support for providers that need a bearer token.
"""

import abc
import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from streamrank.config import is_placeholder
from streamrank.providers.base import (
    HttpStreamProvider,
    ProviderConfigError,
    ProviderResponseError,
    TokenExchangeError,
)

log = logging.getLogger(__name__)


class TokenCache:
    """
    Holds one provider's app access token.

    The first get_token() performs the exchange; later calls reuse the
    token for the life of the instance unless it is invalidated, or
    refresh_on_expiry is set and the token's expires_in has elapsed.
    """

    def __init__(
        self,
        exchange: Callable[[], Awaitable[dict[str, Any]]],
        *,
        name: str = "OAuth",
        refresh_on_expiry: bool = False,
        expiry_margin: float = 5.0,
    ) -> None:
        self._exchange = exchange
        self.name = name
        self.refresh_on_expiry = refresh_on_expiry
        self.expiry_margin = expiry_margin

        self.access_token: str | None = None
        self.expires_at: float | None = None  # Unix timestamp
        self.exchange_count = 0
        self._lock = asyncio.Lock()

    def is_valid(self) -> bool:
        if not self.access_token:
            return False
        if self.refresh_on_expiry and self.expires_at is not None:
            return time.time() < self.expires_at
        return True

    async def get_token(self) -> str:
        if self.is_valid():
            return self.access_token  # type: ignore[return-value]

        async with self._lock:
            # Another task may have finished the exchange while we waited.
            if self.is_valid():
                return self.access_token  # type: ignore[return-value]

            payload = await self._exchange()
            self.exchange_count += 1
            self._store(payload)
            log.debug("%s token acquired (exchange #%d)", self.name, self.exchange_count)
            return self.access_token  # type: ignore[return-value]

    def _store(self, payload: Any) -> None:
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token or not isinstance(token, str):
            raise TokenExchangeError(f"{self.name} token error: {payload}")

        self.access_token = token
        expires_in = payload.get("expires_in")
        try:
            self.expires_at = time.time() + float(expires_in) - self.expiry_margin
        except (TypeError, ValueError):
            self.expires_at = None

    def invalidate(self) -> None:
        """Forget the token so the next get_token() exchanges again."""
        self.access_token = None
        self.expires_at = None


class ClientCredentialsProvider(HttpStreamProvider):
    """
    Provider authenticated with an app access token.

    Subclasses supply _exchange_token() and _auth_headers(); this class owns
    the token cache and retries a data call once after an HTTP 401.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        refresh_on_expiry: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_cache = TokenCache(
            self._exchange_token,
            name=self.name,
            refresh_on_expiry=refresh_on_expiry,
        )

    def check_credentials(self) -> None:
        missing = []
        if is_placeholder(self.client_id):
            missing.append(f"{self.platform.value}_CLIENT_ID")
        if is_placeholder(self.client_secret):
            missing.append(f"{self.platform.value}_CLIENT_SECRET")
        if missing:
            raise ProviderConfigError(f"set {', '.join(missing)}")

    @abc.abstractmethod
    async def _exchange_token(self) -> dict[str, Any]:
        """POST the client-credentials grant and return the JSON payload."""
        raise NotImplementedError

    @abc.abstractmethod
    def _auth_headers(self, token: str) -> dict[str, str]:
        raise NotImplementedError

    async def _authorized_get(self, url: str, **kwargs: Any) -> Any:
        token = await self.token_cache.get_token()
        try:
            return await self._request_json("GET", url, headers=self._auth_headers(token), **kwargs)
        except ProviderResponseError as e:
            if e.status != 401:
                raise
            log.warning("%s rejected token (HTTP 401) – re-authenticating", self.name)
            self.token_cache.invalidate()

        token = await self.token_cache.get_token()
        return await self._request_json("GET", url, headers=self._auth_headers(token), **kwargs)
