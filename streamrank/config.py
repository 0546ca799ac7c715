# streamrank/config.py
"""
Configuration management for streamrank.

Settings are loaded from environment variables or a .env file.

Provider credentials (a provider without them contributes no streams):
    TWITCH_CLIENT_ID      - Twitch application client id
    TWITCH_CLIENT_SECRET  - Twitch application client secret
    YOUTUBE_API_KEY       - YouTube Data API v3 key
    KICK_CLIENT_ID        - Kick application client id
    KICK_CLIENT_SECRET    - Kick application client secret

Optional environment variables:
    YOUTUBE_REGION_CODE          - Region for the live search (default: FR)
    STREAMRANK_LIMIT             - Streams requested per cycle (default: 100)
    STREAMRANK_PROVIDER_TIMEOUT  - Seconds allowed per provider (default: 10)
    STREAMRANK_TOKEN_REFRESH     - Re-exchange OAuth tokens on expiry (default: false)
    LOG_LEVEL                    - Logging level (default: INFO)

Example .env file:
    TWITCH_CLIENT_ID=abc123
    TWITCH_CLIENT_SECRET=shh
    YOUTUBE_API_KEY=AIza...
    LOG_LEVEL=DEBUG
"""

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from streamrank.models import Platform

cwd_env = Path.cwd() / ".env"
if cwd_env.exists():
    load_dotenv(dotenv_path=cwd_env)
else:
    # Fallback to standard behavior (searches parents)
    load_dotenv()

_PLACEHOLDER_PREFIXES = ("your-", "your_", "changeme", "<")


def is_placeholder(value: str | None) -> bool:
    """True for empty credentials and unedited template values."""
    if not value or not value.strip():
        return True
    lowered = value.strip().lower()
    return lowered.startswith(_PLACEHOLDER_PREFIXES)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default: Any, cast: Callable[[str], Any], errors: list[str]) -> Any:
    """Read a numeric variable; a bad value is recorded in `errors` and the default kept."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        errors.append(f"{name} must be a number, got {raw!r}")
        return default


@dataclass
class Settings:
    """
    Global settings for streamrank.

    Values are loaded from environment variables on initialization.
    Users can override these programmatically if needed:

        from streamrank.config import settings
        settings.youtube_api_key = "custom_key"
    """

    twitch_client_id: str = ""
    twitch_client_secret: str = ""
    youtube_api_key: str = ""
    youtube_region_code: str = "FR"
    kick_client_id: str = ""
    kick_client_secret: str = ""

    limit: int = 100
    provider_timeout: float = 10.0
    token_refresh: bool = False
    log_level: str = "INFO"
    env_errors: list[str] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        # Populate from environment at import-time.
        self.twitch_client_id = os.getenv("TWITCH_CLIENT_ID", "")
        self.twitch_client_secret = os.getenv("TWITCH_CLIENT_SECRET", "")
        self.youtube_api_key = os.getenv("YOUTUBE_API_KEY", "")
        self.youtube_region_code = os.getenv("YOUTUBE_REGION_CODE", self.youtube_region_code)
        self.kick_client_id = os.getenv("KICK_CLIENT_ID", "")
        self.kick_client_secret = os.getenv("KICK_CLIENT_SECRET", "")

        # Reported by validate() so a bad value never fails at import time.
        self.env_errors = []
        self.limit = _env_number("STREAMRANK_LIMIT", self.limit, int, self.env_errors)
        self.provider_timeout = _env_number(
            "STREAMRANK_PROVIDER_TIMEOUT", self.provider_timeout, float, self.env_errors
        )
        self.token_refresh = _env_bool("STREAMRANK_TOKEN_REFRESH", self.token_refresh)
        self.log_level = os.getenv("LOG_LEVEL", self.log_level)

    def configured_platforms(self) -> list[Platform]:
        """Platforms whose credentials are present (in registration order)."""
        platforms: list[Platform] = []
        if not (is_placeholder(self.twitch_client_id) or is_placeholder(self.twitch_client_secret)):
            platforms.append(Platform.TWITCH)
        if not is_placeholder(self.youtube_api_key):
            platforms.append(Platform.YOUTUBE)
        if not (is_placeholder(self.kick_client_id) or is_placeholder(self.kick_client_secret)):
            platforms.append(Platform.KICK)
        return platforms

    def validate(self) -> None:
        """
        Validate aggregation settings.

        Missing credentials are not an error here: the affected provider
        simply contributes no streams.

        Raises:
            ValueError: If limit or timeout are malformed or out of range
        """
        if self.env_errors:
            raise ValueError("; ".join(self.env_errors))
        if self.limit < 1:
            raise ValueError(f"STREAMRANK_LIMIT must be positive, got {self.limit}")
        if self.provider_timeout <= 0:
            raise ValueError(
                f"STREAMRANK_PROVIDER_TIMEOUT must be positive, got {self.provider_timeout}"
            )


def load_aggregator_config(config_path: str | Path) -> dict[str, Any]:
    """
    Load aggregation overrides from a YAML file.

    Recognised keys (all optional):
        providers: list of platform names, in registration order
        limit:     streams requested per cycle
        timeout:   seconds allowed per provider
        log_level: logging level

    Args:
        config_path: Path to YAML config file

    Returns:
        Dictionary containing configuration, with `providers` parsed to
        Platform members
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_file) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")

    if config is None:
        raise ValueError(f"Empty config file: {config_path}")
    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    if "providers" in config:
        names = config["providers"]
        if not isinstance(names, list):
            raise ValueError(f"'providers' must be a list in {config_path}")
        config["providers"] = [Platform.parse(name) for name in names]

    return config


# Global settings instance - loaded when module is imported
settings = Settings()
