# streamrank/ranking.py
"""
Ranking of aggregated streams by concurrent viewers.
"""

from collections.abc import Iterable

from streamrank.models import StreamSummary


def rank(streams: Iterable[StreamSummary], limit: int | None = None) -> list[StreamSummary]:
    """
    Order streams by viewer_count, highest first.

    Ties go to the stream that started earlier; remaining ties keep their
    input order. The input is not modified.

    Args:
        streams: Streams to rank
        limit: Keep at most this many entries (None = all)

    Returns:
        A new list in rank order
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    ranked = sorted(streams, key=lambda s: (-s.viewer_count, s.started_at))

    if limit is not None:
        return ranked[:limit]
    return ranked
