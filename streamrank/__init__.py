# streamrank/__init__.py
"""
Streamrank - live stream leaderboard across Twitch, YouTube and Kick.

Fetches the currently live streams from each platform concurrently,
normalizes them into StreamSummary objects and ranks them by concurrent
viewers. A platform that is down or unconfigured simply contributes
nothing.

Quick start:
    1. Create a .env file with the credentials of the platforms you want
       (TWITCH_CLIENT_ID/SECRET, YOUTUBE_API_KEY, KICK_CLIENT_ID/SECRET)
    2. Run `python -m streamrank --limit 20`, or from code:

Example:
    import asyncio
    from streamrank import fetch_rankings

    ranked = asyncio.run(fetch_rankings(limit=20))
    for stream in ranked:
        print(stream.viewer_count, stream.creator.display_name, stream.url)
"""

from .aggregator import aggregate
from .config import settings, load_aggregator_config
from .models import Creator, FetchOptions, Platform, StreamSummary
from .providers import KickClient, StreamProvider, TwitchClient, YouTubeClient
from .ranking import rank
from .runner import fetch_rankings, run_rankings

__version__ = "0.1.0"
__all__ = [
    "aggregate",
    "rank",
    "fetch_rankings",
    "run_rankings",
    "settings",
    "load_aggregator_config",
    "Creator",
    "FetchOptions",
    "Platform",
    "StreamSummary",
    "StreamProvider",
    "TwitchClient",
    "YouTubeClient",
    "KickClient",
]
