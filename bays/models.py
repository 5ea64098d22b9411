"""
Bay status models

Bays are mutable records refreshed by the live status feed. Each carries the
booking currently using it, the next booking on the sheet and the cleaning or
maintenance state shown on the venue floor view.
"""

from __future__ import annotations
from tracking import t

import random
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from infrastructure.constants import (
    MOCK_CUSTOMER_NAMES,
    SIMULATED_BOOKING_MINUTES,
    VENUE_HOURS_TEXT,
    VENUE_LOCATIONS,
)
from infrastructure.formatting import format_time_remaining, format_time_until
from pricing.membership import Membership
from pricing.time_slot import format_clock_time


class VenueLocation(Enum):
    """Physical venues operating simulator bays."""

    REDMOND = "redmond"
    TACOMA = "tacoma"

    @property
    def display_name(self) -> str:
        t('bays.models.VenueLocation.display_name')
        return VENUE_LOCATIONS[self.value][0]

    @property
    def subtitle(self) -> str:
        t('bays.models.VenueLocation.subtitle')
        return VENUE_LOCATIONS[self.value][1]

    @property
    def address(self) -> str:
        t('bays.models.VenueLocation.address')
        return VENUE_LOCATIONS[self.value][2]

    @property
    def hours(self) -> str:
        t('bays.models.VenueLocation.hours')
        return VENUE_HOURS_TEXT

    @classmethod
    def from_value(cls, text: str) -> "VenueLocation":
        t('bays.models.VenueLocation.from_value')
        normalised = str(text).strip().lower()
        for member in cls:
            if normalised in (member.value, member.display_name.lower()):
                return member
        raise ValueError(f"Unknown venue location: {text!r}")


@dataclass(frozen=True)
class ActiveBooking:
    """Booking currently occupying a bay."""

    booking_id: str
    member_name: str
    start_time: datetime
    end_time: datetime
    member_tier: Optional[Membership] = None

    def time_remaining(self, now: datetime) -> timedelta:
        t('bays.models.ActiveBooking.time_remaining')
        return self.end_time - now

    def time_remaining_text(self, now: datetime) -> str:
        t('bays.models.ActiveBooking.time_remaining_text')
        return format_time_remaining(self.time_remaining(now))


@dataclass(frozen=True)
class UpcomingBooking:
    """Next booking on a bay's sheet."""

    booking_id: str
    member_name: str
    start_time: datetime
    member_tier: Optional[Membership] = None

    def time_until_start(self, now: datetime) -> timedelta:
        t('bays.models.UpcomingBooking.time_until_start')
        return self.start_time - now

    def time_until_start_text(self, now: datetime) -> str:
        t('bays.models.UpcomingBooking.time_until_start_text')
        return format_time_until(self.time_until_start(now), prefix="Next:")


def new_booking_id(rng: Optional[random.Random] = None) -> str:
    """Random booking identifier; reproducible when ``rng`` is seeded."""
    t('bays.models.new_booking_id')
    if rng is None:
        return uuid.uuid4().hex
    return uuid.UUID(int=rng.getrandbits(128), version=4).hex


@dataclass
class BayStatus:
    """
    Live state of one simulator bay.

    Invariant: an available bay never holds a current booking. ``occupy`` and
    ``release`` are the only transitions that touch both fields and keep them
    in step.
    """

    bay_id: str
    name: str
    location: VenueLocation
    is_available: bool
    last_cleaning_time: datetime
    current_booking: Optional[ActiveBooking] = None
    next_booking: Optional[UpcomingBooking] = None
    is_under_maintenance: bool = False
    estimated_available: Optional[datetime] = None

    @property
    def status_text(self) -> str:
        t('bays.models.BayStatus.status_text')
        if self.is_under_maintenance:
            return "Maintenance"
        if self.is_available:
            return "Available"
        if self.current_booking is not None:
            return "In Use"
        return "Cleaning"

    @property
    def next_available_text(self) -> Optional[str]:
        t('bays.models.BayStatus.next_available_text')
        if self.estimated_available is None:
            return None
        return f"Available at {format_clock_time(self.estimated_available)}"

    def is_consistent(self) -> bool:
        t('bays.models.BayStatus.is_consistent')
        return not (self.is_available and self.current_booking is not None)

    def occupy(self, booking: ActiveBooking) -> None:
        t('bays.models.BayStatus.occupy')
        self.is_available = False
        self.current_booking = booking
        self.estimated_available = None

    def release(self, now: datetime) -> None:
        """Free the bay; a released bay has just been cleaned and is out of maintenance."""
        t('bays.models.BayStatus.release')
        self.is_available = True
        self.current_booking = None
        self.is_under_maintenance = False
        self.estimated_available = None
        self.last_cleaning_time = now

    def simulate_status_change(self, rng: random.Random, now: datetime) -> bool:
        """
        Flip a coin and move the bay to the opposite occupancy state.

        Returns:
            bool: True when the bay changed state
        """
        t('bays.models.BayStatus.simulate_status_change')
        if rng.random() >= 0.5:
            return False

        if self.is_available:
            self.occupy(
                ActiveBooking(
                    booking_id=new_booking_id(rng),
                    member_name=rng.choice(MOCK_CUSTOMER_NAMES),
                    start_time=now,
                    end_time=now + timedelta(minutes=SIMULATED_BOOKING_MINUTES),
                    member_tier=rng.choice(list(Membership)),
                )
            )
        else:
            self.release(now)
        return True
