"""Pricing tiers, memberships, time slots and price quotes."""

from .tiers import PricingTier
from .membership import Membership, MembershipBenefit, UNLIMITED
from .calculator import PriceQuote, deposit_for, effective_price, format_currency, quote
from .time_slot import TimeSlot, format_clock_time, generate_time_slots, simulate_availability

__all__ = [
    "PricingTier",
    "Membership",
    "MembershipBenefit",
    "UNLIMITED",
    "PriceQuote",
    "deposit_for",
    "effective_price",
    "format_currency",
    "quote",
    "TimeSlot",
    "format_clock_time",
    "generate_time_slots",
    "simulate_availability",
]
