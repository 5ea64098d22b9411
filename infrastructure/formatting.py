"""Remaining/until time texts shared by bay bookings and customer sessions."""

from __future__ import annotations
from tracking import t

from datetime import timedelta
from typing import Tuple, Union

Seconds = Union[float, timedelta]


def _as_seconds(value: Seconds) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


def split_hours_minutes(value: Seconds) -> Tuple[int, int]:
    """Whole hours and leftover whole minutes, truncating seconds."""
    t('infrastructure.formatting.split_hours_minutes')
    total = int(_as_seconds(value))
    hours = total // 3600
    minutes = (total % 3600) // 60
    return hours, minutes


def format_hours_minutes(value: Seconds) -> str:
    t('infrastructure.formatting.format_hours_minutes')
    hours, minutes = split_hours_minutes(value)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_time_remaining(value: Seconds) -> str:
    """``"1h 5m remaining"``, ``"45m remaining"`` or ``"Overtime"`` once elapsed."""
    t('infrastructure.formatting.format_time_remaining')
    if _as_seconds(value) <= 0:
        return "Overtime"
    return f"{format_hours_minutes(value)} remaining"


def format_time_until(value: Seconds, prefix: str = "Next:") -> str:
    """``"<prefix> 1h 5m"`` or ``"Starting now"`` once the start has passed."""
    t('infrastructure.formatting.format_time_until')
    if _as_seconds(value) <= 0:
        return "Starting now"
    return f"{prefix} {format_hours_minutes(value)}"
