import itertools

import pytest

from pricing.calculator import deposit_for, effective_price, format_currency, quote
from pricing.membership import Membership
from pricing.tiers import PricingTier


def test_afternoon_premium_quote():
    result = quote(PricingTier.AFTERNOON, Membership.PREMIUM)

    assert result.base_price == 48
    assert result.effective_price == pytest.approx(38.40)
    assert result.member_discount == pytest.approx(9.60)
    assert result.deposit == pytest.approx(9.60)
    assert format_currency(result.effective_price) == "$38.40"


def test_effective_price_formula_for_every_pair():
    for tier, membership in itertools.product(PricingTier, Membership):
        expected = tier.base_price * (1 - membership.discount)
        assert effective_price(tier, membership) == pytest.approx(expected)
        assert 0 <= effective_price(tier, membership) <= tier.base_price


def test_higher_rank_never_costs_more():
    for tier in PricingTier:
        prices = [effective_price(tier, member) for member in Membership.ordered()]
        assert prices == sorted(prices, reverse=True)


def test_deposit_is_quarter_of_price():
    assert deposit_for(60) == 15
    assert deposit_for(0) == 0


def test_format_summary_lists_totals():
    summary = quote(PricingTier.EVENING, Membership.BASIC).format_summary()

    assert "Evening (5:00 PM - 10:00 PM)" in summary
    assert "Total: $51.00" in summary
    assert "Deposit due: $12.75" in summary


def test_format_currency_groups_thousands():
    assert format_currency(1234.5) == "$1,234.50"
