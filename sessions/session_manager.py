"""
Customer Session Manager Module

This module provides the CustomerSessionManager class which owns the signed-in
customer's current session. It starts walk-in sessions, schedules upcoming
ones, advances them on a polling timer and keeps the bay board in step by
occupying and releasing bays through the BayStatusManager.
"""
from tracking import t

import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from bays.bay_status_manager import BayStatusManager
from bays.models import ActiveBooking, BayStatus, VenueLocation
from infrastructure.clock import Clock, venue_clock
from infrastructure.constants import DEFAULT_CUSTOMER_NAME, MOCK_UPCOMING_START_MINUTES
from infrastructure.formatting import format_time_remaining, format_time_until
from infrastructure.periodic import PeriodicTask
from infrastructure.settings import AppSettings, get_settings
from pricing.membership import Membership
from sessions.commands import (
    CancelSession,
    ClearSession,
    EndSession,
    ExtendSession,
    MarkNoShow,
    ScheduleSession,
    SessionCommand,
    SessionSnapshot,
    StartSession,
)
from sessions.customer_session import CustomerSession
from sessions.models import SessionStatus, SessionType, UserBookingState

SessionListener = Callable[[SessionSnapshot], None]
MembershipProvider = Callable[[], Optional[Membership]]

MOCK_ACTIVE_BAY = ("tacoma-mickelson", "Mickelson - Tacoma")
MOCK_UPCOMING_BAY = ("tacoma-palmer", "Palmer - Tacoma")


def _default_membership() -> Optional[Membership]:
    return Membership.BASIC


class CustomerSessionManager:
    """
    Owns at most one current customer session and drives its lifecycle.

    Every command returns ``True`` when it changed something. Commands whose
    preconditions fail log a warning and return ``False``.

    Attributes:
        current_session (Optional[CustomerSession]): Session shown to the customer
        history (List[CustomerSession]): Finished sessions, newest last
        last_session_update (datetime): Time of the last change or tick
        logger (logging.Logger): Logger instance for this class
    """

    def __init__(
        self,
        bay_manager: Optional[BayStatusManager] = None,
        *,
        settings: Optional[AppSettings] = None,
        clock: Optional[Clock] = None,
        membership_provider: Optional[MembershipProvider] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        t('sessions.session_manager.CustomerSessionManager.__init__')
        self.settings = settings or get_settings()
        self.clock = clock or venue_clock(self.settings)
        self.bay_manager = bay_manager
        self.membership_provider = membership_provider or _default_membership
        self.logger = logger or logging.getLogger('CustomerSessionManager')

        self.current_session: Optional[CustomerSession] = None
        self.history: List[CustomerSession] = []
        self.last_session_update = self.clock()
        self._listeners: List[SessionListener] = []
        self._task: Optional[PeriodicTask] = None

        if self.bay_manager is not None:
            self.bay_manager.add_listener(lambda _manager: self.check_session_validity())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def start_session(
        self,
        bay_id: str,
        bay_name: str,
        location: VenueLocation,
        duration: Optional[timedelta] = None,
        customer_name: str = DEFAULT_CUSTOMER_NAME,
        session_type: SessionType = SessionType.SIMULATOR,
    ) -> bool:
        """
        Start a walk-in session on a bay right now.

        Args:
            bay_id: Identifier of the bay being used
            bay_name: Display name of the bay
            location: Venue the bay belongs to
            duration: Planned length; defaults to the configured session length

        Returns:
            bool: True if the session was started
        """
        t('sessions.session_manager.CustomerSessionManager.start_session')
        now = self.clock()
        session = self._new_session(
            bay_id, bay_name, location, now, duration, customer_name, session_type,
            status=SessionStatus.ACTIVE,
        )
        if session is None:
            return False

        self.current_session = session
        self._occupy_bay(session)
        self._touch(now)

        self.logger.info(f"""SESSION STARTED
        Session ID: {session.session_id}
        Customer: {session.customer_name}
        Bay: {session.location_display_name}
        Planned end: {session.planned_end_time.isoformat()}
        Duration: {session.duration}
        """)
        self._notify()
        return True

    def schedule_upcoming_session(
        self,
        bay_id: str,
        bay_name: str,
        location: VenueLocation,
        start_time: datetime,
        duration: Optional[timedelta] = None,
        customer_name: str = DEFAULT_CUSTOMER_NAME,
        session_type: SessionType = SessionType.SIMULATOR,
        total_cost: Optional[float] = None,
        membership: Optional[Membership] = None,
    ) -> bool:
        """Book a session that starts at ``start_time``; it activates on the first tick at or after it.

        ``membership`` overrides the signed-in member's tier, so a session booked
        through the wizard records the tier it was priced at.
        """
        t('sessions.session_manager.CustomerSessionManager.schedule_upcoming_session')
        now = self.clock()
        session = self._new_session(
            bay_id, bay_name, location, start_time, duration, customer_name, session_type,
            status=SessionStatus.SCHEDULED, membership=membership,
        )
        if session is None:
            return False

        session.total_cost = total_cost
        session.last_updated = now
        self.current_session = session
        self._touch(now)

        self.logger.info(f"""SESSION SCHEDULED
        Session ID: {session.session_id}
        Customer: {session.customer_name}
        Bay: {session.location_display_name}
        Start: {session.start_time.isoformat()}
        Planned end: {session.planned_end_time.isoformat()}
        Total cost: {session.total_cost}
        """)
        self._notify()
        return True

    def extend_session(self, additional: timedelta) -> bool:
        t('sessions.session_manager.CustomerSessionManager.extend_session')
        session = self.current_session
        if session is None:
            self.logger.warning("No current session to extend")
            return False

        now = self.clock()
        if not session.extend_session(additional, now):
            return False

        if session.is_active:
            self._occupy_bay(session)
        self._touch(now)
        self.logger.info(f"""SESSION EXTENDED
        Session ID: {session.session_id}
        Extended by: {additional}
        New planned end: {session.planned_end_time.isoformat()}
        """)
        self._notify()
        return True

    def end_session(self) -> bool:
        """Complete the active session now, archive it and free its bay."""
        t('sessions.session_manager.CustomerSessionManager.end_session')
        session = self.current_session
        if session is None:
            self.logger.warning("No current session to end")
            return False

        now = self.clock()
        if not session.mark_as_completed(now):
            return False

        self._finish(session, now)
        return True

    def cancel_session(self) -> bool:
        t('sessions.session_manager.CustomerSessionManager.cancel_session')
        session = self.current_session
        if session is None:
            self.logger.warning("No current session to cancel")
            return False

        now = self.clock()
        if not session.mark_as_cancelled(now):
            return False

        self._finish(session, now)
        return True

    def mark_no_show(self) -> bool:
        t('sessions.session_manager.CustomerSessionManager.mark_no_show')
        session = self.current_session
        if session is None:
            self.logger.warning("No current session to mark as no-show")
            return False

        now = self.clock()
        if not session.mark_as_no_show(now):
            return False

        self._finish(session, now)
        return True

    def clear_session(self) -> bool:
        """Drop the current session without archiving it."""
        t('sessions.session_manager.CustomerSessionManager.clear_session')
        session = self.current_session
        if session is None:
            self.logger.warning("No current session to clear")
            return False

        if session.is_active:
            self._release_bay(session)
        self.current_session = None
        self._touch(self.clock())
        self.logger.info(f"SESSION CLEARED: {session.session_id} ({session.status.value})")
        self._notify()
        return True

    def dispatch(self, command: SessionCommand) -> bool:
        """Route a command object to the matching manager method."""
        t('sessions.session_manager.CustomerSessionManager.dispatch')
        if isinstance(command, StartSession):
            return self.start_session(
                command.bay_id,
                command.bay_name,
                command.location,
                duration=command.duration,
                customer_name=command.customer_name,
                session_type=command.session_type,
            )
        if isinstance(command, ScheduleSession):
            return self.schedule_upcoming_session(
                command.bay_id,
                command.bay_name,
                command.location,
                command.start_time,
                duration=command.duration,
                customer_name=command.customer_name,
                session_type=command.session_type,
                total_cost=command.total_cost,
                membership=command.membership,
            )
        if isinstance(command, ExtendSession):
            return self.extend_session(command.additional)
        if isinstance(command, EndSession):
            return self.end_session()
        if isinstance(command, CancelSession):
            return self.cancel_session()
        if isinstance(command, MarkNoShow):
            return self.mark_no_show()
        if isinstance(command, ClearSession):
            return self.clear_session()
        raise TypeError(f"Unsupported session command: {type(command).__name__}")

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def update_session_status(self) -> Optional[CustomerSession]:
        """
        Advance the current session by the clock.

        Returns:
            The session that changed status on this tick, otherwise None
        """
        t('sessions.session_manager.CustomerSessionManager.update_session_status')
        session = self.current_session
        now = self.clock()
        if session is None:
            return None

        previous = session.status
        new_status = session.advance(now)
        if new_status is None:
            return None

        self.logger.info(f"""SESSION STATUS UPDATED
        Session ID: {session.session_id}
        Bay: {session.location_display_name}
        Old status: {previous.value}
        New status: {new_status.value}
        At: {now.isoformat()}
        """)

        if new_status is SessionStatus.ACTIVE:
            self._occupy_bay(session)
            self._touch(now)
            self._notify()
        elif new_status.is_terminal:
            self._finish(session, now)
        return session

    @property
    def poll_interval(self) -> float:
        """Seconds until the next tick: slower while a session is running."""
        t('sessions.session_manager.CustomerSessionManager.poll_interval')
        if self.is_session_active:
            return self.settings.active_session_poll_interval
        return self.settings.session_poll_interval

    def start_monitoring(self) -> PeriodicTask:
        t('sessions.session_manager.CustomerSessionManager.start_monitoring')
        if self._task is None:
            self._task = PeriodicTask(
                self.update_session_status,
                lambda: self.poll_interval,
                name='CustomerSessionMonitor',
                logger=self.logger,
            )
        self._task.start()
        return self._task

    async def stop(self) -> None:
        t('sessions.session_manager.CustomerSessionManager.stop')
        if self._task is not None:
            await self._task.stop()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def is_session_active(self) -> bool:
        t('sessions.session_manager.CustomerSessionManager.is_session_active')
        return self.current_session is not None and self.current_session.is_active

    @property
    def user_booking_state(self) -> UserBookingState:
        t('sessions.session_manager.CustomerSessionManager.user_booking_state')
        if self.current_session is None:
            return UserBookingState.WALK_IN
        return UserBookingState.for_status(self.current_session.status)

    @property
    def current_bay_name(self) -> Optional[str]:
        t('sessions.session_manager.CustomerSessionManager.current_bay_name')
        return self.current_session.bay_name if self.current_session else None

    @property
    def current_location(self) -> Optional[VenueLocation]:
        t('sessions.session_manager.CustomerSessionManager.current_location')
        return self.current_session.location if self.current_session else None

    @property
    def session_time_remaining(self) -> Optional[timedelta]:
        t('sessions.session_manager.CustomerSessionManager.session_time_remaining')
        if self.current_session is None:
            return None
        return self.current_session.time_remaining(self.clock())

    @property
    def session_time_remaining_text(self) -> Optional[str]:
        t('sessions.session_manager.CustomerSessionManager.session_time_remaining_text')
        remaining = self.session_time_remaining
        if remaining is None:
            return None
        return format_time_remaining(remaining)

    @property
    def upcoming_session_time_until_start(self) -> Optional[timedelta]:
        t('sessions.session_manager.CustomerSessionManager.upcoming_session_time_until_start')
        if self.current_session is None:
            return None
        return self.current_session.time_until_start(self.clock())

    @property
    def upcoming_session_time_text(self) -> Optional[str]:
        t('sessions.session_manager.CustomerSessionManager.upcoming_session_time_text')
        until = self.upcoming_session_time_until_start
        if until is None:
            return None
        return format_time_until(until, prefix="Starts in")

    def get_current_bay_status(self) -> Optional[BayStatus]:
        t('sessions.session_manager.CustomerSessionManager.get_current_bay_status')
        if self.current_session is None or self.bay_manager is None:
            return None
        return self.bay_manager.get_bay(self.current_session.bay_id)

    def get_available_bays(self, location: VenueLocation) -> List[BayStatus]:
        t('sessions.session_manager.CustomerSessionManager.get_available_bays')
        if self.bay_manager is None:
            return []
        return self.bay_manager.get_available_bays(location)

    def check_session_validity(self) -> bool:
        """Warn when the bay board disagrees with the active session."""
        t('sessions.session_manager.CustomerSessionManager.check_session_validity')
        session = self.current_session
        if session is None or not session.is_active:
            return True

        bay = self.get_current_bay_status()
        if bay is not None and bay.is_available:
            self.logger.warning(
                f"Active session {session.session_id} but bay {bay.name} reports available"
            )
            return False
        return True

    def snapshot(self) -> SessionSnapshot:
        t('sessions.session_manager.CustomerSessionManager.snapshot')
        now = self.clock()
        history_ids = tuple(item.session_id for item in self.history)
        session = self.current_session
        if session is None:
            return SessionSnapshot(
                taken_at=now,
                booking_state=UserBookingState.WALK_IN,
                history_ids=history_ids,
            )

        remaining = session.time_remaining(now)
        until = session.time_until_start(now)
        return SessionSnapshot(
            taken_at=now,
            booking_state=UserBookingState.for_status(session.status),
            session_id=session.session_id,
            status=session.status,
            bay_id=session.bay_id,
            bay_name=session.bay_name,
            location=session.location,
            start_time=session.start_time,
            planned_end_time=session.planned_end_time,
            time_remaining_text=format_time_remaining(remaining) if remaining is not None else None,
            time_until_start_text=(
                format_time_until(until, prefix="Starts in") if until is not None else None
            ),
            history_ids=history_ids,
        )

    def add_listener(self, callback: SessionListener) -> None:
        t('sessions.session_manager.CustomerSessionManager.add_listener')
        self._listeners.append(callback)

    # ------------------------------------------------------------------
    # Mock data for development
    # ------------------------------------------------------------------
    def start_mock_active_session(self) -> bool:
        t('sessions.session_manager.CustomerSessionManager.start_mock_active_session')
        bay_id, bay_name = MOCK_ACTIVE_BAY
        if self.current_session is not None:
            self.clear_session()
        return self.start_session(bay_id, bay_name, VenueLocation.TACOMA)

    def start_mock_upcoming_session(self) -> bool:
        t('sessions.session_manager.CustomerSessionManager.start_mock_upcoming_session')
        bay_id, bay_name = MOCK_UPCOMING_BAY
        if self.current_session is not None:
            self.clear_session()
        start_time = self.clock() + timedelta(minutes=MOCK_UPCOMING_START_MINUTES)
        return self.schedule_upcoming_session(bay_id, bay_name, VenueLocation.TACOMA, start_time)

    def mock_session_history(self) -> List[CustomerSession]:
        """Three completed sessions from the past two days."""
        t('sessions.session_manager.CustomerSessionManager.mock_session_history')
        now = self.clock()
        rows = [
            ("tacoma-mickelson", "Mickelson - Tacoma", timedelta(hours=2), SessionType.SIMULATOR),
            ("tacoma-palmer", "Palmer - Tacoma", timedelta(days=1), SessionType.SIMULATOR),
            ("tacoma-woods", "Woods - Tacoma", timedelta(days=2), SessionType.LESSON),
        ]
        sessions = []
        for bay_id, bay_name, ago, session_type in rows:
            start = now - ago
            end = start + timedelta(hours=1)
            sessions.append(
                CustomerSession(
                    session_id=uuid.uuid4().hex,
                    customer_id="mock-customer",
                    customer_name="John Smith",
                    membership=Membership.BASIC,
                    bay_id=bay_id,
                    bay_name=bay_name,
                    location=VenueLocation.TACOMA,
                    start_time=start,
                    planned_end_time=end,
                    status=SessionStatus.COMPLETED,
                    session_type=session_type,
                    actual_end_time=end,
                    last_updated=end,
                )
            )
        return sessions

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _new_session(
        self,
        bay_id: str,
        bay_name: str,
        location: VenueLocation,
        start_time: datetime,
        duration: Optional[timedelta],
        customer_name: str,
        session_type: SessionType,
        *,
        status: SessionStatus,
        membership: Optional[Membership] = None,
    ) -> Optional[CustomerSession]:
        t('sessions.session_manager.CustomerSessionManager._new_session')
        if self.current_session is not None and not self.current_session.is_terminal:
            self.logger.warning(
                f"Cannot create a session on {bay_name}: session "
                f"{self.current_session.session_id} is still {self.current_session.status.value}"
            )
            return None

        if duration is None:
            duration = timedelta(minutes=self.settings.default_session_minutes)
        if duration <= timedelta(0):
            self.logger.warning(f"Cannot create a session on {bay_name} with duration {duration}")
            return None

        return CustomerSession(
            session_id=uuid.uuid4().hex,
            customer_id=uuid.uuid4().hex,
            customer_name=customer_name,
            membership=membership if membership is not None else self.membership_provider(),
            bay_id=bay_id,
            bay_name=bay_name,
            location=location,
            start_time=start_time,
            planned_end_time=start_time + duration,
            status=status,
            session_type=session_type,
        )

    def _finish(self, session: CustomerSession, now: datetime) -> None:
        """Archive a session that reached a terminal status and clear it."""
        t('sessions.session_manager.CustomerSessionManager._finish')
        self.history.append(session)
        self._release_bay(session)
        self.current_session = None
        self._touch(now)

        self.logger.info(f"""SESSION FINISHED
        Session ID: {session.session_id}
        Bay: {session.location_display_name}
        Status: {session.status.value}
        Actual end: {session.actual_end_time.isoformat() if session.actual_end_time else 'n/a'}
        Archived sessions: {len(self.history)}
        """)
        self._notify()

    def _occupy_bay(self, session: CustomerSession) -> None:
        t('sessions.session_manager.CustomerSessionManager._occupy_bay')
        if self.bay_manager is None:
            return
        self.bay_manager.occupy_bay(
            session.bay_id,
            ActiveBooking(
                booking_id=session.session_id,
                member_name=session.customer_name,
                start_time=session.start_time,
                end_time=session.planned_end_time,
                member_tier=session.membership,
            ),
            hold=True,
        )

    def _release_bay(self, session: CustomerSession) -> None:
        t('sessions.session_manager.CustomerSessionManager._release_bay')
        if self.bay_manager is None:
            return
        bay = self.bay_manager.get_bay(session.bay_id)
        if bay is None:
            self.logger.warning(f"Bay {session.bay_id} for session {session.session_id} no longer exists")
            return
        booking = bay.current_booking
        if booking is not None and booking.booking_id == session.session_id:
            self.bay_manager.release_bay(session.bay_id)

    def _touch(self, now: datetime) -> None:
        self.last_session_update = now

    def _notify(self) -> None:
        t('sessions.session_manager.CustomerSessionManager._notify')
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for callback in list(self._listeners):
            try:
                callback(snapshot)
            except Exception as exc:
                self.logger.error(f"Session listener failed: {exc}")
