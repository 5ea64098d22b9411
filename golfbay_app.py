#!/usr/bin/env python3
"""
Golf bay session service - entrypoint wiring the bay board and session manager.
"""
import tracking
from tracking import t

import asyncio
import logging
import random
import signal
from dataclasses import dataclass
from typing import Optional

from logging_config import setup_logging
from bays.bay_status_manager import BayStatusManager
from booking.booking_manager import BookingManager
from infrastructure.clock import Clock, venue_clock
from infrastructure.settings import AppSettings, get_settings
from sessions.session_manager import CustomerSessionManager


@dataclass
class VenueServices:
    """Managers sharing one clock, one random source and one settings snapshot."""

    settings: AppSettings
    bays: BayStatusManager
    sessions: CustomerSessionManager
    booking: BookingManager


def build_services(
    settings: Optional[AppSettings] = None,
    *,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
) -> VenueServices:
    t('golfbay_app.build_services')
    settings = settings or get_settings()
    clock = clock or venue_clock(settings)
    rng = rng or random.Random(settings.simulation_seed)

    bays = BayStatusManager(settings=settings, clock=clock, rng=rng)
    sessions = CustomerSessionManager(bays, settings=settings, clock=clock)
    booking = BookingManager(settings=settings, clock=clock)
    return VenueServices(settings=settings, bays=bays, sessions=sessions, booking=booking)


async def run(services: VenueServices, stop_event: asyncio.Event) -> None:
    """Run the bay feed and session monitor until ``stop_event`` is set."""
    t('golfbay_app.run')
    logger = logging.getLogger('Main')

    services.bays.start_real_time_updates()
    services.sessions.start_monitoring()
    logger.info("Venue services running")

    try:
        await stop_event.wait()
    finally:
        await services.sessions.stop()
        await services.bays.stop()
        logger.info("Venue services stopped")


async def _main_async(settings: AppSettings) -> None:
    t('golfbay_app._main_async')
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # add_signal_handler is unavailable on Windows event loops
            signal.signal(sig, lambda *_: stop_event.set())

    await run(build_services(settings), stop_event)


def configure_runtime(settings: AppSettings, *, tracking_file: Optional[str] = None) -> str:
    """Set up log handlers and call tracking from one settings snapshot. Returns the log directory."""
    log_dir = setup_logging(settings)
    tracking.configure(settings.tracking_persist, tracking_file)
    t('golfbay_app.configure_runtime')
    return log_dir


def main() -> None:
    """Entry point used by both CLI script and module execution."""
    t('golfbay_app.main')
    settings = get_settings()
    configure_runtime(settings)

    logger = logging.getLogger('Main')
    logger.info("=" * 50)
    logger.info("Golf Bay Sessions - AsyncIO venue service")
    logger.info("=" * 50)

    asyncio.run(_main_async(settings))


if __name__ == '__main__':
    main()
