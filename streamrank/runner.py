# streamrank/runner.py
"""
One aggregation cycle, end to end, plus the command-line entry point.
"""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence

from .aggregator import aggregate
from .config import load_aggregator_config, settings
from .models import FetchOptions, Platform, StreamSummary
from .providers import KickClient, StreamProvider, TwitchClient, YouTubeClient
from .ranking import rank

log = logging.getLogger(__name__)

PROVIDER_CLASSES: dict[Platform, type[StreamProvider]] = {
    Platform.TWITCH: TwitchClient,
    Platform.YOUTUBE: YouTubeClient,
    Platform.KICK: KickClient,
}

DEFAULT_ORDER = [Platform.TWITCH, Platform.YOUTUBE, Platform.KICK]


def configure_logging(level: str = "INFO", force: bool = False) -> None:
    """
    Configure root logger with console output.

    By default, this is non-destructive: if the root logger already has handlers,
    it will do nothing (assuming the application has configured logging).

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        force: If True, clear existing handlers and force this configuration
    """
    root_logger = logging.getLogger()

    # If logging is already configured and we aren't forcing it, exit.
    if root_logger.hasHandlers() and not force:
        return

    root_logger.setLevel(level.upper())

    if force:
        root_logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # stderr, so stdout stays clean for the JSON output
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def build_providers(
    platforms: Sequence[Platform | str] | None = None,
    timeout: float | None = None,
) -> list[StreamProvider]:
    """
    Instantiate providers in registration order.

    All three platforms are registered by default, even without
    credentials; an unconfigured provider just contributes nothing.
    `timeout` overrides the per-request timeout from settings.
    """
    order = [Platform.parse(p) for p in platforms] if platforms is not None else DEFAULT_ORDER
    kwargs = {"timeout": timeout} if timeout is not None else {}
    providers: list[StreamProvider] = []
    for platform in order:
        if any(p.platform is platform for p in providers):
            log.warning("%s listed twice – ignoring repeat", platform.value)
            continue
        providers.append(PROVIDER_CLASSES[platform](**kwargs))
    return providers


async def fetch_rankings(
    limit: int | None = None,
    platform: Platform | str | None = None,
    *,
    providers: Sequence[StreamProvider] | None = None,
    timeout: float | None = None,
) -> list[StreamSummary]:
    """
    Run one aggregation cycle: fan out, merge, deduplicate, rank.

    Providers built here are closed before returning; providers passed in
    are left open for the caller to reuse (their token caches survive).

    Args:
        limit: Streams requested from each provider and kept after ranking
        platform: Restrict the cycle to one platform
        providers: Use these instead of the default set
        timeout: Seconds allowed per provider (default: settings)
    """
    options = FetchOptions(
        limit=limit if limit is not None else settings.limit,
        platform=Platform.parse(platform) if platform is not None else None,
    )
    owned = providers is None
    active = build_providers() if providers is None else list(providers)

    try:
        streams = await aggregate(
            active,
            options,
            timeout=timeout if timeout is not None else settings.provider_timeout,
        )
    finally:
        if owned:
            await asyncio.gather(*(p.close() for p in active), return_exceptions=True)

    ranked = rank(streams, options.limit)
    log.info(
        "Ranked %d streams (%s)",
        len(ranked),
        ", ".join(
            f"{p.value}={sum(1 for s in ranked if s.platform is p)}" for p in Platform
        ),
    )
    return ranked


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="streamrank",
        description="Print the current top live streams across Twitch, YouTube and Kick as JSON.",
    )
    parser.add_argument("--limit", type=int, default=None, help="number of streams to keep")
    parser.add_argument(
        "--platform",
        choices=[p.value for p in Platform],
        type=str.upper,
        default=None,
        help="only query this platform",
    )
    parser.add_argument("--config", default=None, help="YAML file with aggregation overrides")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    return parser.parse_args(argv)


def run_rankings(
    limit: int | None = None,
    platform: str | None = None,
    config_path: str | None = None,
    log_level: str | None = None,
    setup_logging: bool = True,
) -> list[StreamSummary]:
    """
    Blocking wrapper around fetch_rankings() driven by settings and an
    optional YAML config file.
    """
    config = load_aggregator_config(config_path) if config_path else {}

    if setup_logging:
        configure_logging(log_level or config.get("log_level") or settings.log_level)

    settings.validate()

    # YAML overrides apply to this call only; the global settings stay as loaded.
    if limit is None and "limit" in config:
        limit = int(config["limit"])
    timeout = float(config["timeout"]) if "timeout" in config else None
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")
    if timeout is not None and timeout <= 0:
        raise ValueError(f"timeout must be positive, got {timeout}")

    async def main() -> list[StreamSummary]:
        providers = build_providers(config.get("providers"), timeout=timeout)
        try:
            return await fetch_rankings(limit, platform, providers=providers, timeout=timeout)
        finally:
            await asyncio.gather(*(p.close() for p in providers), return_exceptions=True)

    return asyncio.run(main())


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        ranked = run_rankings(
            limit=args.limit,
            platform=args.platform,
            config_path=args.config,
            log_level=args.log_level,
        )
    except (FileNotFoundError, ValueError) as e:
        log.error("Configuration error: %s", e)
        return 1
    except KeyboardInterrupt:
        log.info("Interrupted by user")
        return 130

    json.dump([s.to_dict() for s in ranked], sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0
