# tests/test_ranking.py
"""
Tests for rank().
"""
import pytest

from streamrank.models import Platform
from streamrank.ranking import rank


def test_sorted_by_viewers_descending(stream_factory):
    streams = [stream_factory("a", 10), stream_factory("b", 30), stream_factory("c", 20)]

    ranked = rank(streams)

    assert [s.viewer_count for s in ranked] == [30, 20, 10]


def test_limit_truncates_after_sorting(stream_factory):
    streams = [stream_factory("a", 10), stream_factory("b", 30), stream_factory("c", 20)]

    ranked = rank(streams, limit=2)

    assert [s.viewer_count for s in ranked] == [30, 20]


def test_ties_broken_by_earlier_start(stream_factory, t0, minutes):
    late = stream_factory("late", 50, started_at=t0 + minutes(30))
    early = stream_factory("early", 50, started_at=t0)
    top = stream_factory("top", 99, started_at=t0 + minutes(60))

    ranked = rank([late, early, top])

    assert [s.id for s in ranked] == ["top", "early", "late"]


def test_rank_does_not_mutate_input(stream_factory):
    streams = [stream_factory("a", 1), stream_factory("b", 2)]
    original = list(streams)

    rank(streams, limit=1)

    assert streams == original


def test_empty_and_zero_limit(stream_factory):
    assert rank([]) == []
    assert rank([stream_factory("a", 1)], limit=0) == []


def test_negative_limit_rejected(stream_factory):
    with pytest.raises(ValueError, match="non-negative"):
        rank([stream_factory("a", 1)], limit=-1)


def test_mixed_platforms_rank_together(stream_factory, t0, minutes):
    t1 = stream_factory("t1", 500, platform=Platform.TWITCH, started_at=t0)
    y1 = stream_factory("y1", 9000, platform=Platform.YOUTUBE, started_at=t0 + minutes(5))

    ranked = rank([t1, y1])

    assert [(s.platform, s.id) for s in ranked] == [
        (Platform.YOUTUBE, "y1"),
        (Platform.TWITCH, "t1"),
    ]


def test_output_is_non_increasing_for_larger_input(stream_factory, t0, minutes):
    counts = [5, 100, 5, 0, 42, 100, 7, 7, 3]
    streams = [
        stream_factory(f"s{i}", c, started_at=t0 + minutes(i % 4))
        for i, c in enumerate(counts)
    ]

    ranked = rank(streams)

    for prev, cur in zip(ranked, ranked[1:]):
        assert prev.viewer_count >= cur.viewer_count
        if prev.viewer_count == cur.viewer_count:
            assert prev.started_at <= cur.started_at
