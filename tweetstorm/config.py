"""Runtime settings, read from the environment (and ``.env`` via main.py)."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from tweetstorm.errors import ConfigurationError, InputError
from tweetstorm.length import TWITTER, PlatformConfig, get_platform

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATEFMT = "%H:%M:%S"


@dataclass
class Settings:
    platform: PlatformConfig = TWITTER
    log_level: str = "INFO"
    host: str = "localhost"
    port: int = 5001


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from ``TWEETSTORM_*`` environment variables."""
    environ = os.environ if environ is None else environ

    platform_name = environ.get("TWEETSTORM_PLATFORM", "twitter")
    try:
        platform = get_platform(platform_name)
    except InputError as e:
        raise ConfigurationError(f"TWEETSTORM_PLATFORM: {e}") from e

    raw_port = environ.get("TWEETSTORM_PORT", "5001")
    try:
        port = int(raw_port)
    except ValueError as e:
        raise ConfigurationError(f"TWEETSTORM_PORT must be an integer, got {raw_port!r}") from e
    if not 0 < port < 65536:
        raise ConfigurationError(f"TWEETSTORM_PORT out of range: {port}")

    return Settings(
        platform=platform,
        log_level=environ.get("TWEETSTORM_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        host=environ.get("TWEETSTORM_HOST", "localhost").strip() or "localhost",
        port=port,
    )


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr. Only the entry point should call this."""
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    root.addHandler(handler)
