"""
Helpers/config.py
Environment configuration for the raid relay.

Values are read once at startup (``.env`` is honored through python-dotenv)
and frozen into a ``Config``. Any missing or malformed value raises
``ConfigurationError``; the server refuses to start in that case.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from Helpers.errors import ConfigurationError
from Helpers.variables import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_PORT,
    GUILD_TTL_SECONDS,
    RAID_COOLDOWN_SECONDS,
    WEBHOOK_PATTERN,
)

MEMBERSHIP_MODES = ("cache", "profile")


@dataclass(frozen=True)
class Config:
    webhook_url: str
    guild: str
    wynn_token: str | None = None
    cooldown_seconds: float = RAID_COOLDOWN_SECONDS
    guild_ttl_seconds: float = GUILD_TTL_SECONDS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    membership_mode: str = "cache"
    log_webhook_url: str | None = None
    port: int = DEFAULT_PORT
    test_mode: bool = False


def _is_test_mode(env) -> bool:
    return env.get("TEST_MODE", "").lower() in ("true", "1", "t")


def _positive_number(env, name, default, cast=float):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def _webhook_url(env, test_mode: bool) -> str:
    name = "TEST_DISCORD_WEBHOOK_URL" if test_mode else "DISCORD_WEBHOOK_URL"
    url = (env.get(name) or "").strip()
    if not url:
        raise ConfigurationError(f"{name} is required")
    if not WEBHOOK_PATTERN.fullmatch(url):
        raise ConfigurationError(f"{name} is not a Discord webhook URL")
    return url


def load_config(env=None) -> Config:
    """Build a ``Config`` from ``env`` (defaults to ``os.environ`` after loading ``.env``)."""
    if env is None:
        load_dotenv()
        env = os.environ

    test_mode = _is_test_mode(env)
    webhook_url = _webhook_url(env, test_mode)

    guild = (env.get("GUILD") or "").strip()
    if not guild:
        raise ConfigurationError("GUILD environment variable is required")

    mode = (env.get("MEMBERSHIP_MODE") or "cache").strip().lower()
    if mode not in MEMBERSHIP_MODES:
        raise ConfigurationError(
            f"MEMBERSHIP_MODE must be one of {', '.join(MEMBERSHIP_MODES)}, got {mode!r}"
        )

    log_webhook_url = (env.get("LOG_WEBHOOK_URL") or "").strip() or None
    if log_webhook_url and not WEBHOOK_PATTERN.fullmatch(log_webhook_url):
        raise ConfigurationError("LOG_WEBHOOK_URL is not a Discord webhook URL")

    return Config(
        webhook_url=webhook_url,
        guild=guild,
        wynn_token=env.get("WYNN_TOKEN") or None,
        cooldown_seconds=_positive_number(env, "RAID_COOLDOWN_SECONDS", RAID_COOLDOWN_SECONDS),
        guild_ttl_seconds=_positive_number(env, "GUILD_TTL_SECONDS", GUILD_TTL_SECONDS),
        http_timeout=_positive_number(env, "HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        membership_mode=mode,
        log_webhook_url=log_webhook_url,
        port=_positive_number(env, "PORT", DEFAULT_PORT, cast=int),
        test_mode=test_mode,
    )
