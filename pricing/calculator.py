"""Session price and deposit computation."""

from __future__ import annotations
from tracking import t

from dataclasses import dataclass

from infrastructure.constants import DEPOSIT_RATE
from pricing.membership import Membership
from pricing.tiers import PricingTier


@dataclass(frozen=True)
class PriceQuote:
    """Breakdown of one hourly session price for a tier and membership."""

    tier: PricingTier
    membership: Membership
    base_price: float
    effective_price: float
    member_discount: float
    deposit: float

    def format_summary(self) -> str:
        t('pricing.calculator.PriceQuote.format_summary')
        lines = [
            f"{self.tier.display_name} ({self.tier.time_range})",
            f"Base: {format_currency(self.base_price)}/hr",
            f"{self.membership.display_name} discount: -{format_currency(self.member_discount)}",
            f"Total: {format_currency(self.effective_price)}",
            f"Deposit due: {format_currency(self.deposit)}",
        ]
        return "\n".join(lines)


def effective_price(tier: PricingTier, membership: Membership) -> float:
    """Hourly price after the membership discount."""
    t('pricing.calculator.effective_price')
    return tier.base_price * (1 - membership.discount)


def deposit_for(price: float) -> float:
    """Deposit collected at booking time."""
    t('pricing.calculator.deposit_for')
    return price * DEPOSIT_RATE


def quote(tier: PricingTier, membership: Membership) -> PriceQuote:
    t('pricing.calculator.quote')
    price = effective_price(tier, membership)
    return PriceQuote(
        tier=tier,
        membership=membership,
        base_price=tier.base_price,
        effective_price=price,
        member_discount=tier.base_price - price,
        deposit=deposit_for(price),
    )


def format_currency(amount: float) -> str:
    t('pricing.calculator.format_currency')
    return f"${amount:,.2f}"
