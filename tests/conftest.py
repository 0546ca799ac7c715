# tests/conftest.py
import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from streamrank.models import Creator, FetchOptions, Platform, StreamSummary
from streamrank.providers.base import StreamProvider

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def mock_settings():
    """Automatically mock settings for all provider modules."""
    with patch('streamrank.providers.twitch.settings') as mock_twitch_settings, \
         patch('streamrank.providers.youtube.settings') as mock_youtube_settings, \
         patch('streamrank.providers.kick.settings') as mock_kick_settings:

        for mock_setting in [mock_twitch_settings, mock_youtube_settings, mock_kick_settings]:
            mock_setting.twitch_client_id = "twitch-id"
            mock_setting.twitch_client_secret = "twitch-secret"
            mock_setting.youtube_api_key = "yt-key"
            mock_setting.youtube_region_code = "FR"
            mock_setting.kick_client_id = "kick-id"
            mock_setting.kick_client_secret = "kick-secret"
            mock_setting.provider_timeout = 5.0
            mock_setting.token_refresh = False
            mock_setting.limit = 100
            mock_setting.log_level = "INFO"

        yield mock_twitch_settings


def make_response(status: int = 200, body=None, text: str = ""):
    """A mocked aiohttp response usable as `async with session.request(...)`."""
    resp = MagicMock()
    resp.status = status
    if isinstance(body, Exception):
        resp.json = AsyncMock(side_effect=body)
    else:
        resp.json = AsyncMock(return_value=body)
    resp.text = AsyncMock(return_value=text)
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=None)
    return resp


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def mock_aiohttp_session():
    """Mock aiohttp ClientSession; tests set request.side_effect / return_value."""
    mock_session = MagicMock()
    mock_session.request = MagicMock(return_value=make_response(200, {}))
    mock_session.close = AsyncMock()
    mock_session.headers = {}
    return mock_session


def route(responses: dict):
    """
    Build a session.request side_effect dispatching on URL.

    Values are either a single response or a list consumed in order.
    """
    queues = {url: list(r) if isinstance(r, list) else r for url, r in responses.items()}

    def _side_effect(method, url, **kwargs):
        entry = queues[url]
        if isinstance(entry, list):
            return entry.pop(0)
        return entry

    return _side_effect


def make_stream(
    stream_id: str,
    viewers: int,
    *,
    platform: Platform = Platform.TWITCH,
    streamer_id: str | None = None,
    started_at: datetime = T0,
) -> StreamSummary:
    streamer = streamer_id or f"u-{stream_id}"
    return StreamSummary(
        id=stream_id,
        streamer_id=streamer,
        platform=platform,
        title=f"Stream {stream_id}",
        viewer_count=viewers,
        started_at=started_at,
        url=f"https://example.test/{stream_id}",
        creator=Creator(id=streamer, username=streamer),
    )


@pytest.fixture
def stream_factory():
    """
    Returns a function: (id, viewers, **kw) -> StreamSummary
    """
    return make_stream


class StaticProvider(StreamProvider):
    """In-memory provider with optional delay or failure, for aggregator tests."""

    def __init__(self, platform: Platform, streams=(), *, delay: float = 0.0, error=None):
        self.platform = platform
        self.streams = list(streams)
        self.delay = delay
        self.error = error
        self.calls: list[FetchOptions] = []
        self.closed = False

    async def fetch_trending_streams(self, options: FetchOptions) -> list[StreamSummary]:
        self.calls.append(options)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.streams)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def static_provider():
    return StaticProvider


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def minutes():
    return lambda n: timedelta(minutes=n)


@pytest.fixture
def request_router():
    return route
