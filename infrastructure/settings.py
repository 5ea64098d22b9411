"""Centralized application settings.

All runtime configuration is read here once and handed to the managers as an
immutable :class:`AppSettings` snapshot. Components accept an explicit
settings object so tests can build one with :func:`load_settings` and a plain
mapping instead of touching the process environment.
"""

from __future__ import annotations
from tracking import t

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

import pytz
from dotenv import load_dotenv

from . import constants


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    """Normalize environment strings such as "true"/"1" into booleans."""
    t('infrastructure.settings._to_bool')

    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(value: Optional[str], default: int) -> int:
    t('infrastructure.settings._to_int')

    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_float(value: Optional[str], default: float) -> float:
    t('infrastructure.settings._to_float')

    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class AppSettings:
    """Immutable snapshot of high-level configuration values."""

    production_mode: bool
    timezone: str
    session_poll_interval: float
    active_session_poll_interval: float
    bay_update_interval: float
    bay_flip_probability: float
    connection_drop_probability: float
    default_session_minutes: int
    simulation_seed: Optional[int]
    log_directory: str
    tracking_persist: bool

    def get_timezone(self):
        """Return the ``pytz`` timezone for the venue."""
        t('infrastructure.settings.AppSettings.get_timezone')

        return pytz.timezone(self.timezone)


def load_settings(env: Optional[Mapping[str, str]] = None) -> AppSettings:
    """Load configuration from the environment and fall back to defaults."""
    t('infrastructure.settings.load_settings')

    if env is None:
        load_dotenv(override=False)
        env = os.environ

    production_mode = _to_bool(env.get("PRODUCTION_MODE", "false"))
    timezone = env.get("VENUE_TIMEZONE", constants.DEFAULT_TIMEZONE)

    session_poll_interval = _to_float(
        env.get("SESSION_POLL_INTERVAL"), constants.SESSION_POLL_INTERVAL_SECONDS
    )
    active_session_poll_interval = _to_float(
        env.get("ACTIVE_SESSION_POLL_INTERVAL"),
        constants.ACTIVE_SESSION_POLL_INTERVAL_SECONDS,
    )
    bay_update_interval = _to_float(
        env.get("BAY_UPDATE_INTERVAL"), constants.BAY_UPDATE_INTERVAL_SECONDS
    )
    bay_flip_probability = _to_float(
        env.get("BAY_FLIP_PROBABILITY"), constants.BAY_FLIP_PROBABILITY
    )
    connection_drop_probability = _to_float(
        env.get("CONNECTION_DROP_PROBABILITY"), constants.CONNECTION_DROP_PROBABILITY
    )
    default_session_minutes = _to_int(
        env.get("DEFAULT_SESSION_MINUTES"), constants.DEFAULT_SESSION_MINUTES
    )

    raw_seed = env.get("SIMULATION_SEED")
    simulation_seed = _to_int(raw_seed, 0) if raw_seed not in (None, "") else None

    log_directory = env.get("LOG_DIRECTORY", constants.DEFAULT_LOG_DIRECTORY)
    tracking_persist = _to_bool(env.get("FUNCTION_TRACKING_PERSIST", "false"))

    return AppSettings(
        production_mode=production_mode,
        timezone=timezone,
        session_poll_interval=session_poll_interval,
        active_session_poll_interval=active_session_poll_interval,
        bay_update_interval=bay_update_interval,
        bay_flip_probability=bay_flip_probability,
        connection_drop_probability=connection_drop_probability,
        default_session_minutes=default_session_minutes,
        simulation_seed=simulation_seed,
        log_directory=log_directory,
        tracking_persist=tracking_persist,
    )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached :class:`AppSettings` instance."""
    t('infrastructure.settings.get_settings')

    return load_settings()
