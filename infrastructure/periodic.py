"""Asyncio-driven periodic task used by the bay and session managers."""

from __future__ import annotations
from tracking import t

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from .constants import MIN_ERROR_BACKOFF_SECONDS

Interval = Union[float, Callable[[], float]]


class PeriodicTask:
    """
    Run a callback every ``interval`` seconds on the current event loop.

    The interval may be a number or a zero-argument callable; a callable is
    re-read before every sleep so the owner can change cadence (for example
    the session manager switching from 30s to 60s while a session is active).
    Exceptions raised by the callback are logged and followed by a back-off
    sleep; the loop keeps running until :meth:`stop` is awaited.
    """

    def __init__(
        self,
        callback: Callable[[], Any],
        interval: Interval,
        *,
        name: str = "PeriodicTask",
        logger: Optional[logging.Logger] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        t('infrastructure.periodic.PeriodicTask.__init__')
        self._callback = callback
        self._interval = interval
        self._sleep = sleep
        self.name = name
        self.logger = logger or logging.getLogger(name)
        self.running = False
        self.iterations = 0
        self._task: Optional[asyncio.Task] = None

    def interval_seconds(self) -> float:
        """Return the current interval in seconds."""
        t('infrastructure.periodic.PeriodicTask.interval_seconds')
        value = self._interval() if callable(self._interval) else self._interval
        return max(float(value), 0.0)

    async def run_once(self) -> Any:
        """Invoke the callback once, awaiting it when it is a coroutine."""
        t('infrastructure.periodic.PeriodicTask.run_once')
        result = self._callback()
        if inspect.isawaitable(result):
            result = await result
        self.iterations += 1
        return result

    def start(self) -> asyncio.Task:
        """Schedule the loop on the running event loop."""
        t('infrastructure.periodic.PeriodicTask.start')
        if self._task is not None and not self._task.done():
            return self._task

        self.running = True
        self._task = asyncio.get_running_loop().create_task(self._loop(), name=self.name)
        self.logger.info("Started periodic task %s (every %.1fs)", self.name, self.interval_seconds())
        return self._task

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        t('infrastructure.periodic.PeriodicTask.stop')
        self.running = False
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        self.logger.info("Stopped periodic task %s after %s iterations", self.name, self.iterations)

    async def _loop(self) -> None:
        t('infrastructure.periodic.PeriodicTask._loop')
        while self.running:
            interval = self.interval_seconds()
            await self._sleep(interval)
            if not self.running:
                break
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                self.logger.error("Periodic task %s failed: %s", self.name, exc)
                await self._sleep(max(interval * 2, MIN_ERROR_BACKOFF_SECONDS))
