# streamrank/providers/youtube.py
"""
YouTube Data API v3 provider.

YouTube has no "top live streams" endpoint, so this takes two calls: a
search for live videos ordered by view count, then one batched videos.list
call for snippet, statistics and liveStreamingDetails.

Known caveat: when a video carries no concurrentViewers the lifetime
viewCount is used instead, which is on a different scale from the live
figures other platforms report.
"""

import logging
from typing import Any

from streamrank.config import is_placeholder, settings
from streamrank.models import Creator, FetchOptions, Platform, StreamSummary
from streamrank.normalize import (
    as_count,
    as_str,
    first_present,
    parse_timestamp,
    title_or_placeholder,
)
from streamrank.providers.base import (
    HttpStreamProvider,
    ProviderConfigError,
    ProviderSchemaError,
)

log = logging.getLogger(__name__)


class YouTubeClient(HttpStreamProvider):
    """Live videos from the YouTube Data API, authenticated by API key."""

    platform = Platform.YOUTUBE

    SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
    VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"
    MAX_PAGE_SIZE = 50

    def __init__(
        self,
        api_key: str | None = None,
        region_code: str | None = None,
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("timeout", settings.provider_timeout)
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else settings.youtube_api_key
        self.region_code = region_code or settings.youtube_region_code

    @property
    def name(self) -> str:
        return "YouTube"

    def check_credentials(self) -> None:
        if is_placeholder(self.api_key):
            raise ProviderConfigError("YouTube API key missing or invalid, set YOUTUBE_API_KEY")

    async def _fetch(self, options: FetchOptions) -> list[StreamSummary]:
        video_ids = await self._search_live_video_ids(min(options.limit, self.MAX_PAGE_SIZE))
        if not video_ids:
            return []

        videos = await self._get_video_details(video_ids)

        streams: list[StreamSummary] = []
        for raw in videos:
            stream = normalize_video(raw)
            if stream is not None:
                streams.append(stream)
        return streams

    async def _search_live_video_ids(self, max_results: int) -> list[str]:
        params = {
            "key": self.api_key,
            "part": "snippet",
            "eventType": "live",
            "type": "video",
            "order": "viewCount",
            "maxResults": str(max_results),
            "regionCode": self.region_code,
        }
        payload = await self._request_json("GET", self.SEARCH_URL, params=params)
        self._raise_for_api_error(payload)

        ids: list[str] = []
        for item in self._items(payload, "items"):
            video_id = as_str(first_present(item, "id.videoId"))
            if video_id:
                ids.append(video_id)
        return ids

    async def _get_video_details(self, video_ids: list[str]) -> list[dict[str, Any]]:
        params = {
            "key": self.api_key,
            "part": "snippet,statistics,liveStreamingDetails",
            "id": ",".join(video_ids),
        }
        payload = await self._request_json("GET", self.VIDEOS_URL, params=params)
        self._raise_for_api_error(payload)
        return self._items(payload, "items")

    @staticmethod
    def _raise_for_api_error(payload: Any) -> None:
        if isinstance(payload, dict) and payload.get("error"):
            raise ProviderSchemaError(f"YouTube error: {payload['error']}")


def normalize_video(raw: dict[str, Any]) -> StreamSummary | None:
    """Map one videos.list item onto StreamSummary."""
    video_id = as_str(raw.get("id"))
    snippet = raw.get("snippet") or {}
    channel_id = as_str(snippet.get("channelId"))
    if not video_id or not channel_id:
        log.debug("Skipping YouTube video without id/channel: %s", raw)
        return None

    concurrent = first_present(raw, "liveStreamingDetails.concurrentViewers")
    if concurrent is None:
        log.debug("YouTube video %s has no concurrentViewers, using viewCount", video_id)
        viewers = as_count(first_present(raw, "statistics.viewCount", default=0))
    else:
        viewers = as_count(concurrent)

    published = parse_timestamp(snippet.get("publishedAt"))
    channel_title = as_str(snippet.get("channelTitle")) or channel_id

    return StreamSummary(
        id=video_id,
        streamer_id=channel_id,
        platform=Platform.YOUTUBE,
        title=title_or_placeholder(snippet.get("title")),
        viewer_count=viewers,
        started_at=parse_timestamp(
            first_present(raw, "liveStreamingDetails.actualStartTime"), default=published
        ),
        thumbnail=first_present(snippet, "thumbnails.high.url", "thumbnails.default.url"),
        url=f"https://youtube.com/watch?v={video_id}",
        creator=Creator(id=channel_id, username=channel_title, display_name=channel_title),
        category=None,
    )
