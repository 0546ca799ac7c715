# streamrank/providers/twitch.py
"""
Twitch Helix provider.

Uses an app access token from the client-credentials grant and the
`/helix/streams` endpoint, which already returns live streams ordered by
viewer count.
"""

import logging
from typing import Any

from streamrank.config import settings
from streamrank.models import Creator, FetchOptions, Platform, StreamSummary
from streamrank.normalize import (
    as_count,
    as_str,
    first_present,
    parse_timestamp,
    title_or_placeholder,
)
from streamrank.providers.auth import ClientCredentialsProvider

log = logging.getLogger(__name__)

THUMBNAIL_WIDTH = 320
THUMBNAIL_HEIGHT = 180


class TwitchClient(ClientCredentialsProvider):
    """Live streams from the Twitch Helix API."""

    platform = Platform.TWITCH

    TOKEN_URL = "https://id.twitch.tv/oauth2/token"
    STREAMS_URL = "https://api.twitch.tv/helix/streams"
    MAX_PAGE_SIZE = 100

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("timeout", settings.provider_timeout)
        kwargs.setdefault("refresh_on_expiry", settings.token_refresh)
        super().__init__(
            client_id if client_id is not None else settings.twitch_client_id,
            client_secret if client_secret is not None else settings.twitch_client_secret,
            **kwargs,
        )

    async def _exchange_token(self) -> dict[str, Any]:
        params = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "client_credentials",
        }
        return await self._request_json("POST", self.TOKEN_URL, params=params)

    def _auth_headers(self, token: str) -> dict[str, str]:
        return {
            "Client-Id": self.client_id,
            "Authorization": f"Bearer {token}",
        }

    async def _fetch(self, options: FetchOptions) -> list[StreamSummary]:
        first = min(options.limit, self.MAX_PAGE_SIZE)
        payload = await self._authorized_get(self.STREAMS_URL, params={"first": str(first)})

        streams: list[StreamSummary] = []
        for raw in self._items(payload, "data"):
            stream = normalize_stream(raw)
            if stream is not None:
                streams.append(stream)
        return streams


def thumbnail_url(template: Any) -> str | None:
    """Fill Twitch's {width}x{height} thumbnail template."""
    if not isinstance(template, str) or not template:
        return None
    return template.replace("{width}", str(THUMBNAIL_WIDTH)).replace(
        "{height}", str(THUMBNAIL_HEIGHT)
    )


def normalize_stream(raw: dict[str, Any]) -> StreamSummary | None:
    """Map one Helix `streams` entry onto StreamSummary."""
    stream_id = as_str(raw.get("id"))
    user_id = as_str(raw.get("user_id"))
    login = as_str(raw.get("user_login"))
    if not stream_id or not user_id or not login:
        log.debug("Skipping Twitch stream without id/user: %s", raw)
        return None

    return StreamSummary(
        id=stream_id,
        streamer_id=user_id,
        platform=Platform.TWITCH,
        title=title_or_placeholder(raw.get("title")),
        viewer_count=as_count(raw.get("viewer_count")),
        started_at=parse_timestamp(raw.get("started_at")),
        thumbnail=thumbnail_url(raw.get("thumbnail_url")),
        url=f"https://twitch.tv/{login}",
        creator=Creator(
            id=user_id,
            username=login,
            display_name=as_str(first_present(raw, "user_name", "user_login")) or "",
        ),
        category=as_str(raw.get("game_name")),
    )
