"""Runtime settings sourced from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

DEFAULT_UNCATEGORIZED_NAME = "未分类"
DEFAULT_UNCATEGORIZED_DESCRIPTION = "默认分类，用于存放未分类的提示词"

_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


@dataclass(frozen=True)
class Settings:
    log_level: str
    uncategorized_name: str
    uncategorized_description: str
    dev_mode: bool
    app_base_url: str


def _clean(value: str | None, default: str) -> str:
    """Return a stripped env value, or the default when unset/blank."""
    if value is None:
        return default
    value = value.strip()
    return value or default


def _normalize_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    return default


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return the cached settings for this process."""
    return Settings(
        log_level=_clean(os.getenv("LOG_LEVEL"), "INFO").upper(),
        uncategorized_name=_clean(os.getenv("UNCATEGORIZED_CATEGORY_NAME"), DEFAULT_UNCATEGORIZED_NAME),
        uncategorized_description=_clean(
            os.getenv("UNCATEGORIZED_CATEGORY_DESCRIPTION"), DEFAULT_UNCATEGORIZED_DESCRIPTION
        ),
        dev_mode=_normalize_bool(os.getenv("DEV_MODE")),
        app_base_url=_clean(os.getenv("APP_BASE_URL"), ""),
    )


def uncategorized_name() -> str:
    """Reserved name of every user's fallback category."""
    return get_settings().uncategorized_name


def dev_mode_active() -> bool:
    """Return True if DEV_MODE is on; raise if it is on for a non-local deployment.

    DEV_MODE impersonates ``dev@localhost`` on every request, so it is only
    honoured when APP_BASE_URL is unset or points at a local host.
    """
    settings = get_settings()
    if not settings.dev_mode:
        return False
    if settings.app_base_url:
        url = settings.app_base_url
        hostname = urlparse(url if "://" in url else f"http://{url}").hostname
        if hostname and hostname.lower() not in _LOCAL_HOSTS:
            raise RuntimeError(
                f"DEV_MODE=true is not permitted when APP_BASE_URL points to '{hostname}'"
            )
    return True


def refresh_settings_cache() -> None:
    """Invalidate cached settings (useful for tests)."""
    get_settings.cache_clear()
