# streamrank/normalize.py
"""
Field helpers used by the provider normalizers, plus deduplication.

Upstream payloads are loosely typed: numbers arrive as strings, timestamps
in several ISO 8601 flavours, and some fields change name between API
revisions. These helpers absorb that so each provider's mapping stays short.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from streamrank.models import Platform, StreamSummary

log = logging.getLogger(__name__)

UNTITLED = "Untitled Stream"

_MISSING = object()


def first_present(raw: Mapping[str, Any], *paths: str, default: Any = None) -> Any:
    """
    Return the first value found among `paths` that is not None or "".

    Paths may be dotted ("thumbnail.url") to reach into nested objects.
    """
    for path in paths:
        value: Any = raw
        for part in path.split("."):
            if not isinstance(value, Mapping):
                value = _MISSING
                break
            value = value.get(part, _MISSING)
        if value is _MISSING or value is None or value == "":
            continue
        return value
    return default


def as_str(value: Any) -> str | None:
    """Identifier coercion: ints and strings become str, anything else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (str, int)):
        text = str(value).strip()
        return text or None
    return None


def as_count(value: Any) -> int:
    """Parse a viewer/view count; absent or unparseable values count as 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        # OverflowError: int(float("inf")), or "1e400" via float().
        try:
            count = int(float(value))
        except (TypeError, ValueError, OverflowError):
            log.debug("Ignoring non-numeric count %r", value)
            return 0
    return max(count, 0)


def parse_timestamp(value: Any, default: datetime | None = None) -> datetime:
    """
    Parse an ISO 8601 timestamp into an aware UTC datetime.

    Naive timestamps are assumed to be UTC. Falls back to `default`, or to
    the current time, when the value is missing or unparseable.
    """
    fallback = default or datetime.now(timezone.utc)

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            log.debug("Unparseable timestamp %r, using fallback", value)
            return fallback
    else:
        return fallback

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        log.debug("Timestamp %r out of range, using fallback", value)
        return fallback


def title_or_placeholder(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return UNTITLED


def deduplicate(streams: Iterable[StreamSummary]) -> list[StreamSummary]:
    """
    Drop repeated creators, keeping the first occurrence.

    Two entries are duplicates when they share (platform, streamer_id) or
    (platform, id). Input order is otherwise preserved.
    """
    seen_streamers: set[tuple[Platform, str]] = set()
    seen_sessions: set[tuple[Platform, str]] = set()
    unique: list[StreamSummary] = []

    for stream in streams:
        streamer_key = (stream.platform, stream.streamer_id)
        if streamer_key in seen_streamers or stream.key in seen_sessions:
            log.debug("Dropping duplicate %r", stream)
            continue
        seen_streamers.add(streamer_key)
        seen_sessions.add(stream.key)
        unique.append(stream)

    return unique
