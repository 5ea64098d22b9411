"""Infrastructure helpers."""

from .settings import get_settings, load_settings, AppSettings
from .clock import Clock, venue_clock
from .periodic import PeriodicTask
from .formatting import format_time_remaining, format_time_until
from .constants import *  # noqa: F401,F403

__all__ = [
    "get_settings",
    "load_settings",
    "AppSettings",
    "Clock",
    "venue_clock",
    "PeriodicTask",
    "format_time_remaining",
    "format_time_until",
]
