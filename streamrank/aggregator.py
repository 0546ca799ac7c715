# streamrank/aggregator.py
"""
Concurrent fan-out across providers.
"""

import asyncio
import logging
from collections.abc import Sequence

from streamrank.models import FetchOptions, StreamSummary
from streamrank.normalize import deduplicate
from streamrank.providers.base import StreamProvider

log = logging.getLogger(__name__)


async def _fetch_one(
    provider: StreamProvider,
    options: FetchOptions,
    timeout: float | None,
) -> list[StreamSummary]:
    """Run one provider; whatever happens, hand back a list."""
    try:
        if timeout is None:
            return list(await provider.fetch_trending_streams(options))
        return list(
            await asyncio.wait_for(provider.fetch_trending_streams(options), timeout)
        )
    except asyncio.TimeoutError:
        log.error("%s did not answer within %.1fs – skipping", provider.name, timeout)
        return []
    except Exception:
        # Providers are fail-soft; this only catches bugs so one platform
        # can never take the others down with it.
        log.exception("Unexpected error from %s provider", provider.name)
        return []


async def aggregate(
    providers: Sequence[StreamProvider],
    options: FetchOptions,
    *,
    timeout: float | None = None,
) -> list[StreamSummary]:
    """
    Fetch from every provider concurrently and merge the results.

    Results are concatenated in provider registration order, regardless of
    which provider answers first, then deduplicated.

    Args:
        providers: Providers in registration order
        options: Passed unchanged to every provider
        timeout: Seconds allowed per provider (None = no deadline). This
            covers the provider's whole call, token exchange included,
            while the provider's session timeout applies to each request.

    Returns:
        Merged, deduplicated streams (not yet ranked)
    """
    selected = [p for p in providers if options.accepts(p.platform)]
    if not selected:
        log.warning("No providers selected for this cycle")
        return []

    results = await asyncio.gather(
        *(_fetch_one(p, options, timeout) for p in selected)
    )

    merged: list[StreamSummary] = []
    for provider, streams in zip(selected, results):
        log.debug("%s contributed %d streams", provider.name, len(streams))
        merged.extend(streams)

    unique = deduplicate(merged)
    if len(unique) != len(merged):
        log.info("Removed %d duplicate streams", len(merged) - len(unique))
    return unique
