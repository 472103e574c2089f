"""Configuration lookups for affiliate codes and plugin toggles."""
from __future__ import annotations

import logging
import os
from typing import Mapping, Optional, Protocol

logger = logging.getLogger(__name__)

ENABLED_SETTING = "affiliate_enabled"
SHORTLINK_TIMEOUT_SETTING = "affiliate_shortlink_timeout"

_TRUTHY = {"1", "true", "yes", "on"}


class SettingsSource(Protocol):
    """Anything able to answer a configuration lookup by key."""

    def get(self, key: str) -> Optional[str]:
        """Return the raw value stored for ``key`` or ``None``."""


class EnvironmentSettings:
    """Read settings from environment variables (``affiliate_amazon_com`` -> ``AFFILIATE_AMAZON_COM``)."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix

    def env_name(self, key: str) -> str:
        return f"{self.prefix}{key}".upper()

    def get(self, key: str) -> Optional[str]:
        return os.getenv(self.env_name(key))


class MappingSettings:
    """Serve settings from an in-memory mapping supplied by the host."""

    def __init__(self, values: Mapping[str, object] | None = None) -> None:
        self.values = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        value = self.values.get(key)
        if value is None:
            return None
        return str(value)


_source: SettingsSource = EnvironmentSettings()


def configure(source: SettingsSource) -> SettingsSource:
    """Install ``source`` as the active settings backend and return the previous one."""

    global _source
    previous = _source
    _source = source
    return previous


def current() -> SettingsSource:
    return _source


def get_setting(key: str) -> Optional[str]:
    """Return the stripped value for ``key``; blank values count as missing."""

    value = _source.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def setting_bool(key: str, default: bool = False) -> bool:
    value = get_setting(key)
    if value is None:
        return default
    return value.lower() in _TRUTHY


def setting_float(key: str, default: float) -> float:
    value = get_setting(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric value %r for %s", value, key)
        return default


def is_enabled() -> bool:
    """Return whether the plugin is switched on for this site."""

    return setting_bool(ENABLED_SETTING, default=False)
