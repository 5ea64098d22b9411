"""Time-of-day pricing tiers."""

from __future__ import annotations
from tracking import t

from datetime import datetime
from enum import Enum
from typing import Optional

from infrastructure.constants import (
    TIER_BASE_PRICES,
    TIER_MEMBER_DISCOUNT,
    TIER_SESSION_MINUTES,
    tier_for_hour_name,
)
from infrastructure.settings import get_settings


class PricingTier(Enum):
    """Hourly pricing bracket selected by wall-clock hour."""

    MORNING = "morning"        # [06:00, 12:00)
    AFTERNOON = "afternoon"    # [12:00, 17:00)
    EVENING = "evening"        # [17:00, 22:00)
    NIGHT = "night"            # [22:00, 06:00)

    @property
    def display_name(self) -> str:
        t('pricing.tiers.PricingTier.display_name')
        return self.value.capitalize()

    @property
    def time_range(self) -> str:
        t('pricing.tiers.PricingTier.time_range')
        return _TIME_RANGES[self]

    @property
    def sort_order(self) -> int:
        t('pricing.tiers.PricingTier.sort_order')
        return list(PricingTier).index(self)

    @property
    def base_price(self) -> float:
        """Hourly rate before any discount."""
        t('pricing.tiers.PricingTier.base_price')
        return TIER_BASE_PRICES[self.value]

    @property
    def member_discount(self) -> float:
        t('pricing.tiers.PricingTier.member_discount')
        return TIER_MEMBER_DISCOUNT

    @property
    def member_price(self) -> float:
        t('pricing.tiers.PricingTier.member_price')
        return self.base_price * (1 - self.member_discount)

    @property
    def session_duration_minutes(self) -> int:
        t('pricing.tiers.PricingTier.session_duration_minutes')
        return TIER_SESSION_MINUTES

    @classmethod
    def for_hour(cls, hour: int) -> "PricingTier":
        """Return the tier covering ``hour``; night wraps past midnight."""
        t('pricing.tiers.PricingTier.for_hour')
        return cls(tier_for_hour_name(hour))

    @classmethod
    def current(cls, now: Optional[datetime] = None) -> "PricingTier":
        """Return the tier in effect at ``now`` (venue time by default)."""
        t('pricing.tiers.PricingTier.current')
        if now is None:
            now = datetime.now(get_settings().get_timezone())
        return cls.for_hour(now.hour)

    def is_currently_active(self, now: Optional[datetime] = None) -> bool:
        t('pricing.tiers.PricingTier.is_currently_active')
        return PricingTier.current(now) is self


_TIME_RANGES = {
    PricingTier.MORNING: "OPEN - 12:00 PM",
    PricingTier.AFTERNOON: "12:00 PM - 5:00 PM",
    PricingTier.EVENING: "5:00 PM - 10:00 PM",
    PricingTier.NIGHT: "10:00 PM - CLOSE",
}
