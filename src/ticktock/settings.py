"""
Settings for ticktock.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    ``TickSettings`` reads ``TICKTOCK_*`` environment variables (and a
    ``.env`` file when present) and is validated once at load time.

Fields
──────
backend          : Timer backend (``asyncio`` | ``manual``)
min_interval_ms  : Floor for repeating periods, in milliseconds
log_level        : structlog log level
log_format       : ``json`` | ``console``

Examples:
    >>> from ticktock.settings import get_settings
    >>> settings = get_settings()
    >>> settings.backend.value
    'asyncio'

Tags:
    settings, configuration, pydantic, environment, ticktock
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ticktock.errors import InvalidConfigError
from ticktock.scheduling.protocol import MIN_INTERVAL_MS


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class BackendKind(str, Enum):
    """Supported timer backends."""

    ASYNCIO = "asyncio"
    MANUAL = "manual"


class LogFormat(str, Enum):
    """Supported log renderers."""

    JSON = "json"
    CONSOLE = "console"


class TickSettings(BaseSettings):
    """ticktock configuration.

    All fields can be set via ``TICKTOCK_*`` environment variables (e.g.
    ``TICKTOCK_BACKEND=manual``) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="TICKTOCK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Scheduling ───────────────────────────────────────────────
    backend: BackendKind = Field(default=BackendKind.ASYNCIO)
    min_interval_ms: float = Field(default=MIN_INTERVAL_MS, gt=0)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: LogFormat = Field(default=LogFormat.CONSOLE)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, TickSettings] = {}


def get_settings(*, _force_reload: bool = False) -> TickSettings:
    """Load, validate, and cache a :class:`TickSettings` instance.

    Raises:
        InvalidConfigError: A ``TICKTOCK_*`` value failed validation.
    """
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    try:
        settings = TickSettings()
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ())) or "settings"
        raise InvalidConfigError(key, first.get("input"), f"Invalid configuration for {key}: {first.get('msg')}") from e

    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Drop the cached settings (tests, reconfiguration)."""
    _settings_cache.clear()


__all__ = [
    "LOG_LEVELS",
    "BackendKind",
    "LogFormat",
    "TickSettings",
    "get_settings",
    "clear_settings_cache",
]
