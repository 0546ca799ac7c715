# streamrank/models.py
"""
Normalized data structures shared by every provider.

Each provider maps its raw API payload onto StreamSummary so the aggregator
and ranker never need to know which platform a stream came from.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any


class Platform(str, enum.Enum):
    """Streaming platforms supported by the aggregator."""

    TWITCH = "TWITCH"
    YOUTUBE = "YOUTUBE"
    KICK = "KICK"

    @classmethod
    def parse(cls, value: "str | Platform") -> "Platform":
        """Accept a Platform or a case-insensitive platform name."""
        if isinstance(value, Platform):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(
                f"Unknown platform {value!r}; expected one of "
                f"{', '.join(p.value for p in cls)}"
            ) from None


@dataclass(frozen=True)
class Creator:
    """The broadcaster behind a live stream."""

    id: str
    username: str
    display_name: str = ""
    avatar_url: str | None = None

    def __post_init__(self) -> None:
        # Ranking and search rely on a non-empty display name.
        if not self.display_name:
            object.__setattr__(self, "display_name", self.username or self.id)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "username": self.username,
            "displayName": self.display_name,
        }
        if self.avatar_url is not None:
            out["avatarUrl"] = self.avatar_url
        return out


@dataclass(frozen=True)
class StreamSummary:
    """
    One live stream, normalized across platforms.

    Attributes:
        id: Platform-unique identifier of the live session
        streamer_id: Platform-unique identifier of the broadcaster
        platform: Platform the stream is live on
        title: Stream title ("Untitled Stream" when the platform has none)
        viewer_count: Concurrent viewers (never negative)
        started_at: Timezone-aware start time
        url: Canonical watch URL
        creator: Broadcaster details
        thumbnail: Preview image URL, if any
        category: Game or topic, if the platform exposes one
    """

    id: str
    streamer_id: str
    platform: Platform
    title: str
    viewer_count: int
    started_at: datetime
    url: str
    creator: Creator
    thumbnail: str | None = None
    category: str | None = None

    def __post_init__(self) -> None:
        if self.viewer_count < 0:
            object.__setattr__(self, "viewer_count", 0)

    @property
    def key(self) -> tuple[Platform, str]:
        """Identity of the live session: (platform, id)."""
        return (self.platform, self.id)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON shape served to clients."""
        out: dict[str, Any] = {
            "id": self.id,
            "streamerId": self.streamer_id,
            "platform": self.platform.value,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "viewerCount": self.viewer_count,
            "url": self.url,
            "startedAt": self.started_at.isoformat(),
            "creator": self.creator.to_dict(),
        }
        if self.category is not None:
            out["category"] = self.category
        return out

    def __repr__(self) -> str:
        return (
            f"StreamSummary({self.platform.value}:{self.id}, "
            f"creator={self.creator.display_name!r}, viewers={self.viewer_count})"
        )


@dataclass(frozen=True)
class FetchOptions:
    """
    Options bundle passed unchanged to every provider in one cycle.

    Args:
        limit: Maximum number of streams requested (providers cap it further)
        platform: Only fetch from this platform when set
    """

    limit: int
    platform: Platform | None = None

    def __post_init__(self) -> None:
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 1:
            raise ValueError(f"limit must be a positive integer, got {self.limit!r}")
        if self.platform is not None:
            object.__setattr__(self, "platform", Platform.parse(self.platform))

    def accepts(self, platform: Platform) -> bool:
        return self.platform is None or self.platform is platform
