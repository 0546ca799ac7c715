"""Poll the leaderboard a few times, reusing the same providers."""
import asyncio
import logging

from streamrank import KickClient, TwitchClient, YouTubeClient, fetch_rankings
from streamrank.runner import configure_logging

log = logging.getLogger(__name__)

CYCLES = 3
INTERVAL = 60  # seconds


async def main() -> None:
    # Keeping the providers alive between cycles means each OAuth token is
    # exchanged once, not once per cycle.
    async with TwitchClient() as twitch, YouTubeClient() as youtube, KickClient() as kick:
        for cycle in range(CYCLES):
            ranked = await fetch_rankings(limit=10, providers=[twitch, youtube, kick])

            log.info("Cycle %d: top %d live streams", cycle + 1, len(ranked))
            for position, stream in enumerate(ranked, start=1):
                log.info(
                    "%2d. %-8s %8d  %s - %s",
                    position,
                    stream.platform.value,
                    stream.viewer_count,
                    stream.creator.display_name,
                    stream.title,
                )

            if cycle < CYCLES - 1:
                await asyncio.sleep(INTERVAL)


if __name__ == "__main__":
    configure_logging("INFO")
    asyncio.run(main())
