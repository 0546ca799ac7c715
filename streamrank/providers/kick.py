# streamrank/providers/kick.py
"""
Kick public API provider.

The public API is young and its field names have shifted between
revisions, so each logical field is read from a list of known aliases and
the first one present wins.
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

# Logical field -> raw aliases, most recent API naming first.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("channel_id", "id"),
    "streamer_id": ("broadcaster_user_id", "user_id"),
    "title": ("stream_title", "session_title"),
    "viewer_count": ("viewer_count", "viewers"),
    "started_at": ("started_at", "created_at"),
    "thumbnail": ("thumbnail.url", "thumbnail"),
    "slug": ("slug", "channel.slug"),
    "avatar_url": ("user.profile_pic", "profile_picture"),
    "category": ("category.name",),
}


class KickClient(ClientCredentialsProvider):
    """Live streams from api.kick.com, authenticated via id.kick.com."""

    platform = Platform.KICK

    TOKEN_URL = "https://id.kick.com/oauth/token"
    LIVESTREAMS_URL = "https://api.kick.com/public/v1/livestreams"
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
            client_id if client_id is not None else settings.kick_client_id,
            client_secret if client_secret is not None else settings.kick_client_secret,
            **kwargs,
        )

    async def _exchange_token(self) -> dict[str, Any]:
        form = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        return await self._request_json(
            "POST",
            self.TOKEN_URL,
            data=form,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

    def _auth_headers(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    async def _fetch(self, options: FetchOptions) -> list[StreamSummary]:
        params = {
            "limit": str(min(options.limit, self.MAX_PAGE_SIZE)),
            "sort": "viewer_count",
        }
        payload = await self._authorized_get(self.LIVESTREAMS_URL, params=params)

        streams: list[StreamSummary] = []
        for raw in self._items(payload, "data"):
            stream = normalize_livestream(raw)
            if stream is not None:
                streams.append(stream)
        return streams


def _field(raw: dict[str, Any], name: str) -> Any:
    return first_present(raw, *FIELD_ALIASES[name])


def normalize_livestream(raw: dict[str, Any]) -> StreamSummary | None:
    """Map one `livestreams` entry onto StreamSummary."""
    stream_id = as_str(_field(raw, "id"))
    streamer_id = as_str(_field(raw, "streamer_id"))
    slug = as_str(_field(raw, "slug"))
    if not stream_id or not streamer_id or not slug:
        log.debug("Skipping Kick livestream without id/broadcaster/slug: %s", raw)
        return None

    thumbnail = _field(raw, "thumbnail")
    if not isinstance(thumbnail, str):
        thumbnail = None

    return StreamSummary(
        id=stream_id,
        streamer_id=streamer_id,
        platform=Platform.KICK,
        title=title_or_placeholder(_field(raw, "title")),
        viewer_count=as_count(_field(raw, "viewer_count")),
        started_at=parse_timestamp(_field(raw, "started_at")),
        thumbnail=thumbnail,
        url=f"https://kick.com/{slug}",
        creator=Creator(
            id=streamer_id,
            username=slug,
            display_name=slug,
            avatar_url=as_str(_field(raw, "avatar_url")),
        ),
        category=as_str(_field(raw, "category")),
    )
