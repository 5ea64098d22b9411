"""Shared fakes and utilities for unit tests."""

from __future__ import annotations
from tracking import t

import random
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytz

from infrastructure.settings import AppSettings, load_settings

VENUE_TZ = pytz.timezone("America/Los_Angeles")


class DummyLogger:
    """Lightweight stand-in for ``logging.Logger`` that records calls."""

    def __init__(self) -> None:
        t('tests.helpers.DummyLogger.__init__')
        self.records: List[Tuple[str, Tuple[Any, ...], Dict[str, Any]]] = []

    def _record(self, level: str, *args: Any, **kwargs: Any) -> None:
        self.records.append((level, args, kwargs))

    def debug(self, *args: Any, **kwargs: Any) -> None:
        self._record("debug", *args, **kwargs)

    def info(self, *args: Any, **kwargs: Any) -> None:
        self._record("info", *args, **kwargs)

    def warning(self, *args: Any, **kwargs: Any) -> None:
        self._record("warning", *args, **kwargs)

    def error(self, *args: Any, **kwargs: Any) -> None:
        self._record("error", *args, **kwargs)

    def exception(self, *args: Any, **kwargs: Any) -> None:
        self._record("exception", *args, **kwargs)

    @property
    def messages(self) -> List[Tuple[str, Any]]:
        """Return formatted messages for quick assertions."""
        t('tests.helpers.DummyLogger.messages')

        formatted: List[Tuple[str, Any]] = []
        for level, args, kwargs in self.records:
            message: Any = kwargs.get("msg")
            if args:
                template = args[0]
                if isinstance(template, str) and len(args) > 1:
                    try:
                        message = template % args[1:]
                    except (TypeError, ValueError):
                        message = template
                else:
                    message = template
            formatted.append((level, message))
        return formatted

    def levels(self) -> List[str]:
        return [level for level, _, _ in self.records]

    def contains(self, level: str, fragment: str) -> bool:
        return any(lvl == level and fragment in str(msg) for lvl, msg in self.messages)


class FrozenClock:
    """Callable clock that only moves when a test moves it."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or VENUE_TZ.localize(datetime(2025, 6, 14, 10, 0))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now

    def set(self, value: datetime) -> None:
        self.now = value


class ScriptedRandom(random.Random):
    """``random.Random`` whose ``random()`` replays scripted values first."""

    def __init__(self, values: Iterable[float] = (), seed: int = 0) -> None:
        super().__init__(seed)
        self.scripted = list(values)

    def random(self) -> float:
        if self.scripted:
            return self.scripted.pop(0)
        return super().random()

    # Keeps choice()/randint() on getrandbits so they never eat scripted values.
    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)


def make_settings(**overrides: str) -> AppSettings:
    """Build settings from defaults plus string env overrides, ignoring the real environment."""
    env = {"VENUE_TIMEZONE": "America/Los_Angeles"}
    env.update(overrides)
    return load_settings(env)
