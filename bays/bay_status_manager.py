"""
Bay Status Manager Module

Keeps the live status board for every simulator bay. A periodic tick simulates
the venue feed by flipping bays between occupied and free, and customer
sessions occupy and release their bay through the same manager.
"""

from __future__ import annotations
from tracking import t

import logging
import random
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Set

from bays.mock_data import build_mock_bays
from bays.models import ActiveBooking, BayStatus, VenueLocation
from infrastructure.clock import Clock, venue_clock
from infrastructure.constants import RECONNECT_DELAY_SECONDS
from infrastructure.periodic import PeriodicTask
from infrastructure.settings import AppSettings, get_settings

BayListener = Callable[["BayStatusManager"], None]


class BayStatusManager:
    """
    Owns the bay list and the simulated real-time feed.

    Attributes:
        bays (List[BayStatus]): Every bay across both venues
        last_update (datetime): Time of the last completed tick
        logger (logging.Logger): Logger instance for this class
    """

    def __init__(
        self,
        bays: Optional[List[BayStatus]] = None,
        *,
        settings: Optional[AppSettings] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        t('bays.bay_status_manager.BayStatusManager.__init__')
        self.settings = settings or get_settings()
        self.clock = clock or venue_clock(self.settings)
        self.rng = rng or random.Random(self.settings.simulation_seed)
        self.logger = logger or logging.getLogger('BayStatusManager')

        now = self.clock()
        self.bays: List[BayStatus] = bays if bays is not None else build_mock_bays(now)
        self.last_update = now
        self._disconnected_until: Optional[datetime] = None
        self._held_bookings: Set[str] = set()
        self._listeners: List[BayListener] = []
        self._task: Optional[PeriodicTask] = None

        self.logger.info(f"""BAY STATUS MANAGER INITIALIZED
        Bays: {len(self.bays)}
        Tacoma: {self.get_available_bays_count(VenueLocation.TACOMA)}/{self.get_total_bays_count(VenueLocation.TACOMA)} available
        Redmond: {self.get_available_bays_count(VenueLocation.REDMOND)}/{self.get_total_bays_count(VenueLocation.REDMOND)} available
        """)

    @property
    def is_connected(self) -> bool:
        t('bays.bay_status_manager.BayStatusManager.is_connected')
        if self._disconnected_until is None:
            return True
        return self.clock() >= self._disconnected_until

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def update_bay_statuses(self) -> int:
        """
        Run one simulated feed update.

        Returns:
            int: Number of bays whose occupancy changed
        """
        t('bays.bay_status_manager.BayStatusManager.update_bay_statuses')
        now = self.clock()
        changed = 0

        for bay in self.bays:
            if self.is_held(bay):
                continue
            if self.rng.random() < 0.5 and self.rng.random() < self.settings.bay_flip_probability:
                if bay.simulate_status_change(self.rng, now):
                    changed += 1
                    self.logger.debug(f"Bay {bay.name} is now {bay.status_text}")

        self.last_update = now

        if self.rng.random() < self.settings.connection_drop_probability:
            self._disconnected_until = now + timedelta(seconds=RECONNECT_DELAY_SECONDS)
            self.logger.warning("Bay status feed disconnected, reconnecting shortly")

        if changed:
            self.logger.info(f"""BAY STATUSES UPDATED
        Changed bays: {changed}
        Available: {len(self.get_available_bays())}/{len(self.bays)}
        Updated at: {now.isoformat()}
        """)

        self._notify()
        return changed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_bay(self, bay_id: str) -> Optional[BayStatus]:
        t('bays.bay_status_manager.BayStatusManager.get_bay')
        for bay in self.bays:
            if bay.bay_id == bay_id:
                return bay
        return None

    def find_bay_by_name(self, name: str) -> Optional[BayStatus]:
        t('bays.bay_status_manager.BayStatusManager.find_bay_by_name')
        for bay in self.bays:
            if bay.name == name:
                return bay
        return None

    def get_bays_by_location(self, location: VenueLocation) -> List[BayStatus]:
        t('bays.bay_status_manager.BayStatusManager.get_bays_by_location')
        return [bay for bay in self.bays if bay.location is location]

    def get_available_bays(self, location: Optional[VenueLocation] = None) -> List[BayStatus]:
        t('bays.bay_status_manager.BayStatusManager.get_available_bays')
        bays = self.bays if location is None else self.get_bays_by_location(location)
        return [bay for bay in bays if bay.is_available]

    def get_available_bays_count(self, location: VenueLocation) -> int:
        t('bays.bay_status_manager.BayStatusManager.get_available_bays_count')
        return len(self.get_available_bays(location))

    def get_total_bays_count(self, location: VenueLocation) -> int:
        t('bays.bay_status_manager.BayStatusManager.get_total_bays_count')
        return len(self.get_bays_by_location(location))

    def is_held(self, bay: BayStatus) -> bool:
        """True while the bay carries a customer session the simulated feed must leave alone."""
        t('bays.bay_status_manager.BayStatusManager.is_held')
        booking = bay.current_booking
        return booking is not None and booking.booking_id in self._held_bookings

    def invariant_violations(self) -> List[BayStatus]:
        """Bays marked available while still holding a booking."""
        t('bays.bay_status_manager.BayStatusManager.invariant_violations')
        return [bay for bay in self.bays if not bay.is_consistent()]

    # ------------------------------------------------------------------
    # Mutations driven by customer sessions
    # ------------------------------------------------------------------
    def occupy_bay(self, bay_id: str, booking: ActiveBooking, *, hold: bool = False) -> bool:
        """
        Put ``booking`` on the bay.

        With ``hold`` the booking is pinned: simulated ticks skip the bay until
        :meth:`release_bay` frees it.
        """
        t('bays.bay_status_manager.BayStatusManager.occupy_bay')
        bay = self.get_bay(bay_id)
        if bay is None:
            self.logger.warning(f"Cannot occupy unknown bay {bay_id}")
            return False

        previous = bay.current_booking
        if previous is not None and previous.booking_id != booking.booking_id:
            self._held_bookings.discard(previous.booking_id)
        bay.occupy(booking)
        if hold:
            self._held_bookings.add(booking.booking_id)
        self.logger.info(f"""BAY OCCUPIED
        Bay: {bay.name}
        Member: {booking.member_name}
        Until: {booking.end_time.isoformat()}
        """)
        self._notify()
        return True

    def release_bay(self, bay_id: str) -> bool:
        t('bays.bay_status_manager.BayStatusManager.release_bay')
        bay = self.get_bay(bay_id)
        if bay is None:
            self.logger.warning(f"Cannot release unknown bay {bay_id}")
            return False

        if bay.current_booking is not None:
            self._held_bookings.discard(bay.current_booking.booking_id)
        bay.release(self.clock())
        self.logger.info(f"BAY RELEASED: {bay.name}")
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Listeners and timer
    # ------------------------------------------------------------------
    def add_listener(self, callback: BayListener) -> None:
        t('bays.bay_status_manager.BayStatusManager.add_listener')
        self._listeners.append(callback)

    def _notify(self) -> None:
        t('bays.bay_status_manager.BayStatusManager._notify')
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception as exc:
                self.logger.error(f"Bay status listener failed: {exc}")

    def start_real_time_updates(self) -> PeriodicTask:
        """Schedule :meth:`update_bay_statuses` on the running event loop."""
        t('bays.bay_status_manager.BayStatusManager.start_real_time_updates')
        if self._task is None:
            self._task = PeriodicTask(
                self.update_bay_statuses,
                self.settings.bay_update_interval,
                name='BayStatusUpdates',
                logger=self.logger,
            )
        self._task.start()
        return self._task

    async def stop(self) -> None:
        t('bays.bay_status_manager.BayStatusManager.stop')
        if self._task is not None:
            await self._task.stop()
