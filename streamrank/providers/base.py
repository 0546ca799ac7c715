# streamrank/providers/base.py
"""
Provider-neutral interfaces.

Every platform integration implements StreamProvider. The aggregator only
relies on fetch_trending_streams(), which must never raise: a provider that
cannot reach its platform logs the cause and contributes no streams.
"""

import abc
import asyncio
import logging
from typing import Any

import aiohttp

from streamrank.models import FetchOptions, Platform, StreamSummary

log = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------
class ProviderError(RuntimeError):
    """Base class for failures inside a provider."""


class ProviderConfigError(ProviderError):
    """Credentials are missing or still hold template values."""


class ProviderTransportError(ProviderError):
    """The request never produced a response (network failure, timeout)."""


class ProviderResponseError(ProviderError):
    """The platform answered with a non-2xx status."""

    def __init__(self, status: int, body: Any, url: str = "") -> None:
        self.status = status
        self.body = body
        self.url = url
        super().__init__(f"HTTP {status} from {url or 'upstream'}: {body}")


class ProviderSchemaError(ProviderError):
    """The payload did not have the expected shape."""


class TokenExchangeError(ProviderSchemaError):
    """The OAuth response did not contain an access token."""


# ----------------------------------------------------------------------
# Capability
# ----------------------------------------------------------------------
class StreamProvider(abc.ABC):
    """Abstract base for one streaming platform."""

    platform: Platform

    @abc.abstractmethod
    async def fetch_trending_streams(self, options: FetchOptions) -> list[StreamSummary]:
        """Return live streams in the platform's native order. Never raises."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release any underlying resources."""
        return None

    @property
    def name(self) -> str:
        return self.platform.value.title()


class HttpStreamProvider(StreamProvider):
    """
    Shared aiohttp plumbing and the fail-soft fetch contract.

    Subclasses implement check_credentials() and _fetch(); every error they
    raise is logged and turned into an empty result.
    """

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        *,
        session: aiohttp.ClientSession | None = None,
        timeout: float | None = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "HttpStreamProvider":
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def start(self) -> None:
        """Open the HTTP session."""
        self._ensure_session()

    async def close(self) -> None:
        """Close the session if this provider created it."""
        if self._session and self._owns_session:
            await self._session.close()
            self._session = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        if not self._session:
            self._session = aiohttp.ClientSession(
                headers={"Accept": "application/json"},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owns_session = True
        return self._session

    # ------------------------------------------------------------------
    # Fail-soft entry point
    # ------------------------------------------------------------------
    async def fetch_trending_streams(self, options: FetchOptions) -> list[StreamSummary]:
        if not options.accepts(self.platform):
            return []

        try:
            self.check_credentials()
            streams = await self._fetch(options)
        except ProviderConfigError as e:
            log.error("%s credentials missing: %s", self.name, e)
            return []
        except ProviderError as e:
            log.error("Failed to fetch %s streams: %s", self.name, e)
            return []
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
            log.error("Failed to fetch %s streams: malformed payload (%r)", self.name, e)
            return []

        log.info("Fetched %d streams from %s API", len(streams), self.name)
        return streams

    @abc.abstractmethod
    def check_credentials(self) -> None:
        """Raise ProviderConfigError when credentials are unusable."""
        raise NotImplementedError

    @abc.abstractmethod
    async def _fetch(self, options: FetchOptions) -> list[StreamSummary]:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        """
        Perform one request and decode the JSON body.

        Raises:
            ProviderResponseError: non-2xx status
            ProviderSchemaError: body is not JSON
            ProviderTransportError: network failure or timeout
        """
        session = self._ensure_session()
        log.debug("%s %s", method, url)

        try:
            async with session.request(method, url, **kwargs) as resp:
                if not 200 <= resp.status < 300:
                    try:
                        err_body = await resp.text()
                    except (aiohttp.ClientError, UnicodeDecodeError):
                        err_body = ""
                    raise ProviderResponseError(resp.status, err_body, url)

                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    raise ProviderSchemaError(f"Invalid JSON from {url}: {e}") from e

        except aiohttp.ClientError as e:
            raise ProviderTransportError(f"{method} {url} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise ProviderTransportError(
                f"{method} {url} timed out after {self.timeout}s"
            ) from e

    @staticmethod
    def _items(payload: Any, key: str) -> list[dict[str, Any]]:
        """Extract a list of objects from `payload[key]` (missing = empty)."""
        if not isinstance(payload, dict):
            raise ProviderSchemaError(f"Expected a JSON object, got {type(payload).__name__}")
        items = payload.get(key)
        if items is None:
            return []
        if not isinstance(items, list):
            raise ProviderSchemaError(f"Expected '{key}' to be a list")
        return [item for item in items if isinstance(item, dict)]
