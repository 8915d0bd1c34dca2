"""Configuration management for the episode release notifier."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlparse

DEFAULT_FEED_URL = "https://mgpk-cdn.magazinepocket.com/static/rss/2620/feed.xml"
DEFAULT_REGION = "ap-northeast-1"
DEFAULT_LOOKBACK_HOURS = 24


class ConfigError(ValueError):
    """Raised when a required setting is missing or malformed."""


class SelectionPolicy(str, Enum):
    """How fresh entries are chosen from the feed."""

    # Gate on the latest entry, notify about the one before it
    SECOND_LATEST = "second_latest"
    # Notify about every entry newer than the cutoff
    ALL_FRESH = "all_fresh"


@dataclass
class NotifierConfig:
    """Settings for one notifier invocation."""

    topic_arn: str
    region: str = DEFAULT_REGION
    key: str | None = None
    policy: SelectionPolicy = SelectionPolicy.SECOND_LATEST
    feed_url: str = DEFAULT_FEED_URL
    lookback_hours: int = DEFAULT_LOOKBACK_HOURS
    log_level: str = "INFO"


def _get(environ: Mapping[str, str], name: str) -> str | None:
    """Return a stripped value, treating blank strings as unset."""
    value = environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def load_config(environ: Mapping[str, str] | None = None) -> NotifierConfig:
    """Build the configuration from environment variables.

    Args:
        environ: Source of variables, defaults to ``os.environ``

    Returns:
        Validated NotifierConfig

    Raises:
        ConfigError: If a required value is missing or a value is invalid
    """
    if environ is None:
        environ = os.environ

    topic_arn = _get(environ, "TOPIC_ARN")
    if not topic_arn:
        raise ConfigError("Missing environment variables: TOPIC_ARN")

    raw_policy = _get(environ, "NOTIFY_POLICY") or SelectionPolicy.SECOND_LATEST.value
    try:
        policy = SelectionPolicy(raw_policy.lower())
    except ValueError:
        allowed = ", ".join(p.value for p in SelectionPolicy)
        raise ConfigError(
            f"Invalid NOTIFY_POLICY {raw_policy!r}, expected one of: {allowed}"
        ) from None

    key = _get(environ, "KEY")
    if policy is SelectionPolicy.ALL_FRESH and not key:
        raise ConfigError("Missing environment variables: KEY")

    feed_url = _get(environ, "FEED_URL") or DEFAULT_FEED_URL
    if urlparse(feed_url).scheme != "https":
        raise ConfigError(f"Feed URL must use HTTPS protocol: {feed_url}")

    raw_hours = _get(environ, "LOOKBACK_HOURS")
    lookback_hours = DEFAULT_LOOKBACK_HOURS
    if raw_hours is not None:
        try:
            lookback_hours = int(raw_hours)
        except ValueError:
            raise ConfigError(f"LOOKBACK_HOURS must be an integer: {raw_hours!r}") from None
        if lookback_hours <= 0:
            raise ConfigError(f"LOOKBACK_HOURS must be positive: {lookback_hours}")

    log_level = (_get(environ, "LOG_LEVEL") or "INFO").upper()
    if log_level not in logging.getLevelNamesMapping():
        raise ConfigError(f"Invalid LOG_LEVEL {log_level!r}")

    return NotifierConfig(
        topic_arn=topic_arn,
        region=_get(environ, "AWS_REGION") or DEFAULT_REGION,
        key=key,
        policy=policy,
        feed_url=feed_url,
        lookback_hours=lookback_hours,
        log_level=log_level,
    )
