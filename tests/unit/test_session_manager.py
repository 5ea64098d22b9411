import random
from datetime import timedelta

import pytest

from bays.bay_status_manager import BayStatusManager
from bays.models import VenueLocation
from pricing.membership import Membership
from sessions.commands import (
    CancelSession,
    ClearSession,
    EndSession,
    ExtendSession,
    MarkNoShow,
    ScheduleSession,
    StartSession,
)
from sessions.models import SessionStatus, UserBookingState
from sessions.session_manager import CustomerSessionManager
from tests.helpers import DummyLogger, FrozenClock, make_settings


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def bay_manager(clock):
    return BayStatusManager(
        settings=make_settings(),
        clock=clock,
        rng=random.Random(3),
        logger=DummyLogger(),
    )


@pytest.fixture
def manager(clock, bay_manager):
    return CustomerSessionManager(
        bay_manager,
        settings=make_settings(),
        clock=clock,
        logger=DummyLogger(),
    )


def test_starts_as_walk_in(manager):
    assert manager.current_session is None
    assert manager.user_booking_state is UserBookingState.WALK_IN
    assert manager.session_time_remaining_text is None
    assert manager.upcoming_session_time_text is None
    assert manager.poll_interval == 30.0


def test_start_session_occupies_bay(manager, bay_manager, clock):
    assert manager.start_session("tacoma-woods", "Woods - Tacoma", VenueLocation.TACOMA) is True

    session = manager.current_session
    assert session.status is SessionStatus.ACTIVE
    assert session.start_time == clock()
    assert session.planned_end_time == clock() + timedelta(minutes=60)
    assert session.membership is Membership.BASIC
    assert session.customer_name == "Guest User"
    assert manager.is_session_active
    assert manager.user_booking_state is UserBookingState.CURRENTLY_PLAYING
    assert manager.poll_interval == 60.0

    bay = manager.get_current_bay_status()
    assert bay.is_available is False
    assert bay.current_booking.booking_id == session.session_id
    assert manager.check_session_validity() is True


def test_remaining_text_counts_down_to_overtime(manager, clock):
    manager.start_session("tacoma-woods", "Woods - Tacoma", VenueLocation.TACOMA, duration=timedelta(minutes=65))

    assert manager.session_time_remaining_text == "1h 5m remaining"
    clock.advance(minutes=20)
    assert manager.session_time_remaining_text == "45m remaining"


def test_second_session_is_rejected_while_one_is_live(manager):
    manager.start_session("tacoma-woods", "Woods - Tacoma", VenueLocation.TACOMA)
    first_id = manager.current_session.session_id

    assert manager.start_session("tacoma-ochoa", "Ochoa - Tacoma", VenueLocation.TACOMA) is False
    assert manager.current_session.session_id == first_id
    assert "warning" in manager.logger.levels()


def test_zero_duration_is_rejected(manager):
    assert manager.start_session("tacoma-woods", "Woods - Tacoma", VenueLocation.TACOMA, duration=timedelta(0)) is False
    assert manager.current_session is None


def test_end_session_archives_and_releases_bay(manager, bay_manager, clock):
    manager.start_session("tacoma-woods", "Woods - Tacoma", VenueLocation.TACOMA)
    session = manager.current_session
    end = clock.advance(minutes=40)

    assert manager.end_session() is True
    assert manager.current_session is None
    assert manager.history == [session]
    assert session.status is SessionStatus.COMPLETED
    assert session.actual_end_time == end
    assert bay_manager.get_bay("tacoma-woods").is_available is True
    assert manager.last_session_update == end


def test_end_session_requires_active_session(manager, clock):
    manager.schedule_upcoming_session(
        "tacoma-palmer", "Palmer - Tacoma", VenueLocation.TACOMA, clock() + timedelta(minutes=25)
    )

    assert manager.end_session() is False
    assert manager.current_session.is_scheduled


def test_scheduled_session_lifecycle_through_ticks(manager, bay_manager, clock):
    start = clock() + timedelta(minutes=25)
    manager.schedule_upcoming_session("tacoma-palmer", "Palmer - Tacoma", VenueLocation.TACOMA, start)

    assert manager.user_booking_state is UserBookingState.UPCOMING_BOOKING
    assert manager.upcoming_session_time_text == "Starts in 25m"
    assert bay_manager.get_bay("tacoma-palmer").is_available is True

    clock.advance(minutes=10)
    assert manager.update_session_status() is None

    now = clock.advance(minutes=16)
    session = manager.update_session_status()
    assert session.status is SessionStatus.ACTIVE
    assert session.start_time == now
    assert bay_manager.get_bay("tacoma-palmer").current_booking.booking_id == session.session_id

    end = clock.advance(hours=1)
    finished = manager.update_session_status()
    assert finished is session
    assert session.status is SessionStatus.COMPLETED
    assert session.actual_end_time == end
    assert manager.current_session is None
    assert manager.history[-1] is session
    assert bay_manager.get_bay("tacoma-palmer").is_available is True


def test_past_start_becomes_active_on_next_tick(manager, clock):
    manager.schedule_upcoming_session(
        "tacoma-palmer", "Palmer - Tacoma", VenueLocation.TACOMA, clock() - timedelta(minutes=5)
    )

    assert manager.upcoming_session_time_text == "Starting now"
    assert manager.update_session_status().status is SessionStatus.ACTIVE


def test_extend_active_session_moves_bay_booking(manager, bay_manager):
    manager.start_session("tacoma-woods", "Woods - Tacoma", VenueLocation.TACOMA)
    planned = manager.current_session.planned_end_time

    assert manager.extend_session(timedelta(minutes=30)) is True
    assert manager.current_session.planned_end_time == planned + timedelta(minutes=30)
    assert bay_manager.get_bay("tacoma-woods").current_booking.end_time == planned + timedelta(minutes=30)


def test_commands_without_session_warn(manager):
    assert manager.extend_session(timedelta(minutes=10)) is False
    assert manager.end_session() is False
    assert manager.cancel_session() is False
    assert manager.mark_no_show() is False
    assert manager.clear_session() is False
    assert manager.logger.levels().count("warning") == 5


def test_cancel_and_no_show_archive_scheduled_sessions(manager, clock):
    start = clock() + timedelta(hours=2)
    manager.schedule_upcoming_session("tacoma-palmer", "Palmer - Tacoma", VenueLocation.TACOMA, start)
    assert manager.cancel_session() is True

    manager.schedule_upcoming_session("tacoma-palmer", "Palmer - Tacoma", VenueLocation.TACOMA, start)
    assert manager.mark_no_show() is True

    assert [session.status for session in manager.history] == [SessionStatus.CANCELLED, SessionStatus.NO_SHOW]
    assert manager.current_session is None


def test_clear_session_discards_without_archiving(manager, bay_manager):
    manager.start_session("tacoma-woods", "Woods - Tacoma", VenueLocation.TACOMA)

    assert manager.clear_session() is True
    assert manager.current_session is None
    assert manager.history == []
    assert bay_manager.get_bay("tacoma-woods").is_available is True


def test_dispatch_routes_commands(manager, clock):
    start = clock() + timedelta(minutes=30)

    assert manager.dispatch(ScheduleSession("tacoma-palmer", "Palmer - Tacoma", VenueLocation.TACOMA, start, total_cost=40.8))
    assert manager.current_session.total_cost == 40.8
    assert manager.dispatch(ExtendSession(timedelta(minutes=15)))
    assert manager.dispatch(CancelSession())
    assert manager.dispatch(StartSession("tacoma-woods", "Woods - Tacoma", VenueLocation.TACOMA))
    assert manager.dispatch(EndSession())
    assert manager.dispatch(MarkNoShow()) is False
    assert manager.dispatch(ClearSession()) is False
    assert len(manager.history) == 2


def test_dispatch_rejects_unknown_command(manager):
    with pytest.raises(TypeError):
        manager.dispatch("end")


def test_listeners_receive_snapshots(manager, clock):
    snapshots = []
    manager.add_listener(snapshots.append)

    manager.start_session("tacoma-woods", "Woods - Tacoma", VenueLocation.TACOMA)
    manager.end_session()

    assert [snap.booking_state for snap in snapshots] == [
        UserBookingState.CURRENTLY_PLAYING,
        UserBookingState.WALK_IN,
    ]
    assert snapshots[0].time_remaining_text == "1h 0m remaining"
    assert snapshots[0].bay_name == "Woods - Tacoma"
    assert snapshots[1].has_session is False
    assert len(snapshots[1].history_ids) == 1


def test_validity_check_flags_bay_freed_underneath_session(manager, bay_manager):
    manager.start_session("tacoma-woods", "Woods - Tacoma", VenueLocation.TACOMA)

    bay_manager.get_bay("tacoma-woods").release(bay_manager.clock())

    assert manager.check_session_validity() is False


def test_available_bays_come_from_bay_manager(manager, bay_manager):
    assert manager.get_available_bays(VenueLocation.REDMOND) == bay_manager.get_available_bays(VenueLocation.REDMOND)
    assert CustomerSessionManager(settings=make_settings(), clock=FrozenClock()).get_available_bays(
        VenueLocation.REDMOND
    ) == []


def test_mock_helpers(manager, clock):
    assert manager.start_mock_upcoming_session() is True
    assert manager.current_session.start_time == clock() + timedelta(minutes=25)
    assert manager.current_session.bay_name == "Palmer - Tacoma"

    assert manager.start_mock_active_session() is True
    assert manager.current_session.is_active
    assert manager.current_session.bay_name == "Mickelson - Tacoma"

    history = manager.mock_session_history()
    assert len(history) == 3
    assert all(session.is_completed and session.actual_end_time for session in history)


def test_simulated_feed_never_frees_the_active_session_bay(clock):
    settings = make_settings(BAY_FLIP_PROBABILITY="1", CONNECTION_DROP_PROBABILITY="0")
    bays = BayStatusManager(settings=settings, clock=clock, rng=random.Random(0), logger=DummyLogger())
    manager = CustomerSessionManager(bays, settings=settings, clock=clock, logger=DummyLogger())
    assert manager.start_mock_active_session() is True

    for _ in range(10):
        clock.advance(seconds=5)
        bays.update_bay_statuses()
        assert manager.is_session_active
        assert manager.check_session_validity() is True

    assert manager.end_session() is True
    assert bays.is_held(bays.get_bay("tacoma-mickelson")) is False


def test_schedule_command_carries_membership(manager, clock):
    command = ScheduleSession(
        "redmond-hogan",
        "Hogan - Redmond",
        VenueLocation.REDMOND,
        clock() + timedelta(hours=2),
        total_cost=38.40,
        membership=Membership.PREMIUM,
    )

    assert manager.dispatch(command) is True
    assert manager.current_session.membership is Membership.PREMIUM
    assert manager.current_session.total_cost == 38.40
