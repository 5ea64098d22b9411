"""
Membership tiers, discounts and benefits

Each tier carries a session discount that never decreases with rank, a fixed
benefit list and the booking privileges shown during the membership check.
"""

from __future__ import annotations
from tracking import t

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


UNLIMITED = -1


@dataclass(frozen=True)
class MembershipBenefit:
    """One line item on a membership card."""

    title: str
    description: str
    is_premium: bool = False


@dataclass(frozen=True)
class _TierTerms:
    rank: int
    discount: float
    description: str
    advance_booking_days: int
    priority_booking: bool
    guest_passes: int
    monthly_price: Optional[float]
    benefits: Tuple[MembershipBenefit, ...]


class Membership(Enum):
    """Membership tiers ordered by rank."""

    GUEST = "guest"
    BASIC = "basic"
    PREMIUM = "premium"
    PLATINUM = "platinum"
    ELITE = "elite"

    @property
    def _terms(self) -> _TierTerms:
        return _TERMS[self]

    @property
    def display_name(self) -> str:
        t('pricing.membership.Membership.display_name')
        return self.value.capitalize()

    @property
    def description(self) -> str:
        t('pricing.membership.Membership.description')
        return self._terms.description

    @property
    def rank(self) -> int:
        t('pricing.membership.Membership.rank')
        return self._terms.rank

    @property
    def discount(self) -> float:
        """Fractional discount applied to session prices (0.2 == 20%)."""
        t('pricing.membership.Membership.discount')
        return self._terms.discount

    @property
    def benefits(self) -> Tuple[MembershipBenefit, ...]:
        t('pricing.membership.Membership.benefits')
        return self._terms.benefits

    @property
    def premium_benefit_count(self) -> int:
        t('pricing.membership.Membership.premium_benefit_count')
        return sum(1 for benefit in self.benefits if benefit.is_premium)

    @property
    def advance_booking_days(self) -> int:
        t('pricing.membership.Membership.advance_booking_days')
        return self._terms.advance_booking_days

    @property
    def priority_booking(self) -> bool:
        t('pricing.membership.Membership.priority_booking')
        return self._terms.priority_booking

    @property
    def guest_passes(self) -> int:
        """Monthly guest passes; ``UNLIMITED`` (-1) for elite."""
        t('pricing.membership.Membership.guest_passes')
        return self._terms.guest_passes

    @property
    def monthly_price(self) -> Optional[float]:
        t('pricing.membership.Membership.monthly_price')
        return self._terms.monthly_price

    @property
    def is_paid(self) -> bool:
        t('pricing.membership.Membership.is_paid')
        return self is not Membership.GUEST

    def price_for(self, base_price: float) -> float:
        """Apply this tier's discount to ``base_price``."""
        t('pricing.membership.Membership.price_for')
        return base_price * (1 - self.discount)

    @classmethod
    def from_value(cls, text: str) -> "Membership":
        """Parse a tier from its value or name, case-insensitively."""
        t('pricing.membership.Membership.from_value')
        normalised = str(text).strip().lower()
        for member in cls:
            if normalised in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown membership tier: {text!r}")

    @classmethod
    def ordered(cls) -> Tuple["Membership", ...]:
        t('pricing.membership.Membership.ordered')
        return tuple(sorted(cls, key=lambda member: member.rank))


_B = MembershipBenefit

_TERMS: Dict[Membership, _TierTerms] = {
    Membership.GUEST: _TierTerms(
        rank=0,
        discount=0.0,
        description="Pay-as-you-play access to golf simulators",
        advance_booking_days=7,
        priority_booking=False,
        guest_passes=0,
        monthly_price=None,
        benefits=(
            _B("Pay-per-session pricing", "Access to all simulators"),
            _B("Basic customer support", "Standard assistance"),
        ),
    ),
    Membership.BASIC: _TierTerms(
        rank=1,
        discount=0.15,
        description="Essential membership with member pricing and basic perks",
        advance_booking_days=7,
        priority_booking=False,
        guest_passes=0,
        monthly_price=29.99,
        benefits=(
            _B("Member pricing", "15% off all sessions"),
            _B("7-day advance booking", "Book up to 1 week ahead"),
            _B("Session history tracking", "Track your progress"),
            _B("Basic equipment rental", "Standard club rental"),
        ),
    ),
    Membership.PREMIUM: _TierTerms(
        rank=2,
        discount=0.20,
        description="Enhanced membership with priority booking and exclusive benefits",
        advance_booking_days=14,
        priority_booking=True,
        guest_passes=2,
        monthly_price=59.99,
        benefits=(
            _B("Premium member pricing", "20% off all sessions"),
            _B("14-day advance booking", "Book up to 2 weeks ahead"),
            _B("Priority booking", "Get first access to premium times", True),
            _B("Free equipment rental", "Complimentary club rental", True),
            _B("2 guest passes/month", "Bring friends at member rates", True),
            _B("Performance analytics", "Detailed swing analysis", True),
        ),
    ),
    Membership.PLATINUM: _TierTerms(
        rank=3,
        discount=0.25,
        description="Premium membership with concierge service and maximum benefits",
        advance_booking_days=30,
        priority_booking=True,
        guest_passes=5,
        monthly_price=99.99,
        benefits=(
            _B("Platinum pricing", "25% off all sessions"),
            _B("30-day advance booking", "Book up to 1 month ahead"),
            _B("VIP priority booking", "First access to all time slots", True),
            _B("Premium equipment included", "Top-tier club selection", True),
            _B("5 guest passes/month", "Bring more friends", True),
            _B("Private lesson discount", "20% off instruction", True),
            _B("Exclusive event access", "Members-only tournaments", True),
            _B("Concierge service", "Personal booking assistance", True),
        ),
    ),
    Membership.ELITE: _TierTerms(
        rank=4,
        discount=1.0,
        description="Ultimate membership experience with unlimited access",
        advance_booking_days=365,
        priority_booking=True,
        guest_passes=UNLIMITED,
        monthly_price=199.99,
        benefits=(
            _B("Elite unlimited access", "Unlimited simulator sessions", True),
            _B("Anytime booking", "Book any available time", True),
            _B("Personal concierge", "Dedicated service representative", True),
            _B("Premium equipment suite", "Exclusive club access", True),
            _B("Unlimited guest passes", "Bring anyone, anytime", True),
            _B("Free private lessons", "Monthly complimentary instruction", True),
            _B("Elite events", "Exclusive elite member experiences", True),
            _B("Course access partnerships", "Preferred rates at partner courses", True),
        ),
    ),
}
