import random
from datetime import date, timedelta

import pytest

from bays.bay_status_manager import BayStatusManager
from booking.booking_manager import BookingManager, BookingStep, MembershipFlowStep
from pricing.membership import Membership
from pricing.tiers import PricingTier
from sessions.models import SessionStatus
from sessions.session_manager import CustomerSessionManager
from tests.helpers import DummyLogger, FrozenClock, make_settings


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def booking(clock):
    return BookingManager(settings=make_settings(), clock=clock, logger=DummyLogger())


def test_defaults(booking, clock):
    assert booking.player_count == 2
    assert booking.selected_date == clock().date()
    assert booking.selected_time_slot == ""
    assert booking.selected_pricing is None
    assert booking.membership is Membership.GUEST
    assert booking.current_step is BookingStep.MEMBERSHIP_CHECK
    assert booking.membership_step is MembershipFlowStep.AGE_VERIFICATION
    assert booking.available_time_slots == ["9:15 AM", "9:30 AM", "9:45 AM", "10:00 AM", "10:15 AM"]


def test_totals_without_tier_are_zero(booking):
    assert booking.total_price == 0
    assert booking.member_discount == 0
    assert booking.deposit_amount == 0
    assert booking.session_duration == 60
    assert booking.quote() is None


def test_afternoon_premium_totals(booking):
    booking.select_pricing(PricingTier.AFTERNOON)
    booking.set_membership(Membership.PREMIUM)

    assert booking.total_price == pytest.approx(38.40)
    assert booking.member_discount == pytest.approx(9.60)
    assert booking.deposit_amount == pytest.approx(9.60)
    assert booking.quote().effective_price == pytest.approx(38.40)
    assert booking.is_existing_member is True


def test_player_count_is_clamped(booking):
    assert booking.set_player_count(10) == 6
    assert booking.increment_players() is False
    assert booking.set_player_count(0) == 1
    assert booking.decrement_players() is False
    assert booking.increment_players() is True
    assert booking.player_count == 2


def test_navigation_walks_steps_in_order(booking):
    visited = [booking.current_step]
    while booking.advance():
        visited.append(booking.current_step)

    assert visited == list(BookingStep)
    assert booking.current_step is BookingStep.CONFIRMATION
    assert booking.go_back() is True
    assert booking.current_step is BookingStep.PHONE_VERIFICATION


def test_go_back_stops_at_first_step(booking):
    assert booking.go_back() is False
    assert booking.current_step is BookingStep.MEMBERSHIP_CHECK


def test_membership_flow_steps(booking):
    steps = [booking.membership_step]
    while booking.advance_membership_step():
        steps.append(booking.membership_step)
    assert steps == list(MembershipFlowStep)


def test_can_send_code_requires_phone(booking):
    assert booking.can_send_code is False
    booking.phone_number = "  "
    assert booking.can_send_code is False
    booking.phone_number = "253-555-0100"
    assert booking.can_send_code is True


def test_planned_start_combines_date_and_label(booking):
    assert booking.planned_start() is None

    booking.selected_date = date(2025, 6, 20)
    assert booking.select_time_slot("9:45 AM") is True
    start = booking.planned_start()

    assert (start.year, start.month, start.day, start.hour, start.minute) == (2025, 6, 20, 9, 45)
    assert start.tzinfo is not None


def test_unoffered_or_garbled_slot_labels(booking):
    assert booking.select_time_slot("3:00 AM") is False
    assert booking.selected_time_slot == ""

    booking.selected_time_slot = "quarter past nine"
    assert booking.planned_start() is None


def test_complete_booking_schedules_session(booking, clock):
    bay_manager = BayStatusManager(settings=make_settings(), clock=clock, rng=random.Random(1), logger=DummyLogger())
    sessions = CustomerSessionManager(bay_manager, settings=make_settings(), clock=clock, logger=DummyLogger())
    bay = bay_manager.get_bay("redmond-watson")

    booking.selected_date = clock().date() + timedelta(days=1)
    booking.select_time_slot("10:00 AM")
    booking.select_pricing(PricingTier.AFTERNOON)
    booking.set_membership(Membership.PREMIUM)

    assert booking.complete_booking(sessions, bay) is True
    session = sessions.current_session
    assert session.status is SessionStatus.SCHEDULED
    assert session.bay_name == "Watson - Redmond"
    assert session.start_time == booking.planned_start()
    assert session.duration == timedelta(minutes=60)
    assert session.total_cost == pytest.approx(38.40)
    assert session.membership is Membership.PREMIUM


def test_complete_booking_requires_bay_and_time(booking, clock):
    sessions = CustomerSessionManager(settings=make_settings(), clock=clock, logger=DummyLogger())

    assert booking.complete_booking(sessions, None) is False
    assert sessions.current_session is None


def test_reset_restores_defaults(booking):
    booking.set_player_count(5)
    booking.select_pricing(PricingTier.EVENING)
    booking.advance()

    booking.reset()

    assert booking.player_count == 2
    assert booking.selected_pricing is None
    assert booking.current_step is BookingStep.MEMBERSHIP_CHECK
