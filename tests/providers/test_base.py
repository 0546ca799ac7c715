# tests/providers/test_base.py
"""
Tests for the shared HTTP plumbing and the fail-soft contract.
"""
from unittest.mock import patch

import pytest

from streamrank.models import FetchOptions, Platform
from streamrank.providers.base import (
    HttpStreamProvider,
    ProviderConfigError,
    ProviderResponseError,
    ProviderSchemaError,
)


class EchoProvider(HttpStreamProvider):
    platform = Platform.TWITCH
    URL = "https://api.example.test/live"

    def __init__(self, *, configured=True, fail_with=None, **kwargs):
        super().__init__(**kwargs)
        self.configured = configured
        self.fail_with = fail_with

    def check_credentials(self):
        if not self.configured:
            raise ProviderConfigError("set ECHO_TOKEN")

    async def _fetch(self, options):
        if self.fail_with is not None:
            raise self.fail_with
        payload = await self._request_json("GET", self.URL)
        return self._items(payload, "data")


@pytest.mark.asyncio
class TestHttpStreamProvider:
    async def test_creates_and_closes_own_session(self, mock_aiohttp_session):
        with patch("aiohttp.ClientSession", return_value=mock_aiohttp_session) as session_cls:
            async with EchoProvider(timeout=3.0) as provider:
                assert provider._session is mock_aiohttp_session

            session_cls.assert_called_once()
            assert session_cls.call_args.kwargs["timeout"].total == 3.0
            mock_aiohttp_session.close.assert_awaited_once()
            assert provider._session is None

    async def test_request_json_raises_response_error(self, mock_aiohttp_session, response_factory):
        mock_aiohttp_session.request.return_value = response_factory(404, None, text="not found")
        provider = EchoProvider(session=mock_aiohttp_session)

        with pytest.raises(ProviderResponseError) as exc_info:
            await provider._request_json("GET", EchoProvider.URL)

        assert exc_info.value.status == 404
        assert exc_info.value.body == "not found"
        assert "HTTP 404" in str(exc_info.value)

    async def test_items_rejects_non_object(self):
        with pytest.raises(ProviderSchemaError):
            HttpStreamProvider._items([1, 2], "data")

    async def test_items_missing_key_is_empty(self):
        assert HttpStreamProvider._items({"pagination": {}}, "data") == []

    @pytest.mark.parametrize("error", [
        ProviderConfigError("x"),
        ProviderSchemaError("x"),
        KeyError("snippet"),
        TypeError("NoneType is not subscriptable"),
        OverflowError("cannot convert float infinity to integer"),
    ])
    async def test_errors_become_empty_result(self, mock_aiohttp_session, error):
        provider = EchoProvider(session=mock_aiohttp_session, fail_with=error)

        assert await provider.fetch_trending_streams(FetchOptions(limit=5)) == []

    async def test_unconfigured_logs_and_skips_network(self, mock_aiohttp_session):
        provider = EchoProvider(session=mock_aiohttp_session, configured=False)

        with patch("streamrank.providers.base.log.error") as mock_error:
            assert await provider.fetch_trending_streams(FetchOptions(limit=5)) == []

        mock_error.assert_called_once()
        assert mock_error.call_args.args[0] == "%s credentials missing: %s"
        mock_aiohttp_session.request.assert_not_called()
