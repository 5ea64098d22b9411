"""Clock helpers so every component reads time through one seam."""

from __future__ import annotations
from tracking import t

from datetime import datetime
from typing import Callable, Optional

from .settings import AppSettings, get_settings

Clock = Callable[[], datetime]


def venue_clock(settings: Optional[AppSettings] = None) -> Clock:
    """Return a clock producing aware datetimes in the venue timezone."""
    t('infrastructure.clock.venue_clock')

    tz = (settings or get_settings()).get_timezone()

    def _now() -> datetime:
        return datetime.now(tz)

    return _now
