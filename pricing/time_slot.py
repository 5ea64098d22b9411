"""
TimeSlot model for bookable hours and the hourly slot generator
"""

from __future__ import annotations
from tracking import t

import random
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from infrastructure.constants import (
    CANCELLATION_DEADLINE_HOURS,
    DEPOSIT_RATE,
    DEPOSIT_REQUIRED_FROM_PRICE,
    MAX_PLAYERS,
    STARTING_SOON_MINUTES,
)
from pricing.tiers import PricingTier


@dataclass(frozen=True)
class TimeSlot:
    """
    A single bookable window on a venue's simulators.

    Attributes:
        start_time: Aware start of the slot
        end_time: Aware end of the slot, strictly after ``start_time``
        price: Undiscounted price for the whole slot
        tier: Pricing tier the slot falls into
        member_price: Explicit member price; wins over any promotion
        promotion_discount: Fractional discount applied when ``has_promotion``
    """

    start_time: datetime
    end_time: datetime
    price: float
    tier: PricingTier
    member_price: Optional[float] = None
    max_players: int = MAX_PLAYERS
    requires_deposit: bool = False
    deposit_amount: Optional[float] = None
    available: bool = True
    simulator_count: int = 1
    cancellation_deadline: Optional[datetime] = None
    has_promotion: bool = False
    promotion_discount: Optional[float] = None
    promotion_description: Optional[str] = None
    venue_id: int = 1

    def __post_init__(self) -> None:
        if self.end_time <= self.start_time:
            raise ValueError(
                f"Time slot must end after it starts ({self.start_time} -> {self.end_time})"
            )

    def __str__(self) -> str:
        return f"{self.tier.display_name}: {self.time_range_text}"

    @property
    def duration(self) -> timedelta:
        t('pricing.time_slot.TimeSlot.duration')
        return self.end_time - self.start_time

    @property
    def duration_hours(self) -> float:
        t('pricing.time_slot.TimeSlot.duration_hours')
        return self.duration.total_seconds() / 3600

    @property
    def duration_text(self) -> str:
        t('pricing.time_slot.TimeSlot.duration_text')
        total_minutes = int(self.duration.total_seconds() // 60)
        hours, minutes = divmod(total_minutes, 60)
        if minutes == 0:
            return f"{hours}h"
        return f"{hours}h {minutes}m"

    @property
    def time_range_text(self) -> str:
        t('pricing.time_slot.TimeSlot.time_range_text')
        return f"{format_clock_time(self.start_time)} - {format_clock_time(self.end_time)}"

    @property
    def price_per_hour(self) -> float:
        t('pricing.time_slot.TimeSlot.price_per_hour')
        return self.price / self.duration_hours

    @property
    def effective_price(self) -> float:
        """Member price if set, else the promotional price, else list price."""
        t('pricing.time_slot.TimeSlot.effective_price')
        if self.member_price is not None:
            return self.member_price
        if self.has_promotion and self.promotion_discount is not None:
            return self.price * (1 - self.promotion_discount)
        return self.price

    @property
    def savings(self) -> Optional[float]:
        t('pricing.time_slot.TimeSlot.savings')
        if self.member_price is not None:
            return self.price - self.member_price
        if self.has_promotion and self.promotion_discount is not None:
            return self.price * self.promotion_discount
        return None

    @property
    def savings_text(self) -> Optional[str]:
        t('pricing.time_slot.TimeSlot.savings_text')
        if self.savings is None:
            return None
        return f"Save ${self.savings:.0f}"

    def is_bookable(self, now: datetime) -> bool:
        t('pricing.time_slot.TimeSlot.is_bookable')
        return self.available and self.start_time > now

    def is_past(self, now: datetime) -> bool:
        t('pricing.time_slot.TimeSlot.is_past')
        return self.end_time <= now

    def is_active(self, now: datetime) -> bool:
        t('pricing.time_slot.TimeSlot.is_active')
        return self.start_time <= now <= self.end_time

    def is_soon(self, now: datetime) -> bool:
        t('pricing.time_slot.TimeSlot.is_soon')
        return now < self.start_time <= now + timedelta(minutes=STARTING_SOON_MINUTES)

    def status_text(self, now: datetime) -> str:
        t('pricing.time_slot.TimeSlot.status_text')
        if self.is_past(now):
            return "Past"
        if self.is_active(now):
            return "Active"
        if self.is_soon(now):
            return "Starting Soon"
        if not self.available:
            return "Unavailable"
        return "Available"

    def requires_cancellation_fee(self, now: datetime) -> bool:
        t('pricing.time_slot.TimeSlot.requires_cancellation_fee')
        if self.cancellation_deadline is None:
            return False
        return now > self.cancellation_deadline

    def with_changes(self, **changes) -> "TimeSlot":
        """Return a replacement slot; slots are never edited in place."""
        t('pricing.time_slot.TimeSlot.with_changes')
        return replace(self, **changes)


def format_clock_time(value: datetime) -> str:
    """Format a time the way slot labels read, e.g. ``9:15 AM``."""
    t('pricing.time_slot.format_clock_time')
    return value.strftime("%I:%M %p").lstrip("0")


def simulate_availability(start: datetime, *, now: datetime, rng: random.Random) -> bool:
    """Mock availability for a slot starting at ``start``; past slots never open."""
    t('pricing.time_slot.simulate_availability')
    if start <= now:
        return False

    hour = start.hour
    is_weekend = start.weekday() >= 5
    is_evening = 17 <= hour <= 20

    if is_weekend and is_evening:
        return rng.random() > 0.3
    if is_evening:
        return rng.random() > 0.2
    if hour < 12 or hour > 21:
        return rng.random() > 0.1
    return rng.random() > 0.15


def generate_time_slots(
    day: date,
    *,
    open_hour: int,
    close_hour: int,
    tz,
    now: datetime,
    rng: Optional[random.Random] = None,
    simulator_count: int = 4,
    venue_id: int = 1,
) -> List[TimeSlot]:
    """
    Generate hourly time slots between opening and closing on ``day``.

    Args:
        day: Calendar day the venue opens on
        open_hour: Opening hour (0-23)
        close_hour: Closing hour (0-23); earlier than ``open_hour`` means the
            venue closes after midnight
        tz: ``pytz`` timezone used to localize slot boundaries
        now: Current time, used to mark past slots unavailable
        rng: Random source for the availability mock

    Returns:
        Slots in chronological order, each priced by its own start hour
    """
    t('pricing.time_slot.generate_time_slots')
    rng = rng or random.Random()

    current = tz.localize(datetime.combine(day, time(hour=open_hour)))
    closing_day = day + timedelta(days=1) if close_hour < open_hour else day
    closing = tz.localize(datetime.combine(closing_day, time(hour=close_hour)))

    slots: List[TimeSlot] = []
    while current < closing:
        slot_end = tz.normalize(current + timedelta(hours=1))
        if slot_end > closing:
            break

        tier = PricingTier.for_hour(current.hour)
        base_price = tier.base_price
        is_available = simulate_availability(current, now=now, rng=rng)
        requires_deposit = base_price >= DEPOSIT_REQUIRED_FROM_PRICE

        slots.append(
            TimeSlot(
                start_time=current,
                end_time=slot_end,
                price=base_price,
                tier=tier,
                member_price=tier.member_price,
                max_players=MAX_PLAYERS,
                requires_deposit=requires_deposit,
                deposit_amount=base_price * DEPOSIT_RATE if requires_deposit else None,
                available=is_available,
                simulator_count=rng.randint(1, simulator_count) if is_available else 0,
                cancellation_deadline=current - timedelta(hours=CANCELLATION_DEADLINE_HOURS),
                venue_id=venue_id,
            )
        )
        current = slot_end

    return slots
