"""
Customer Session Model

A customer session is one customer's use of one bay. It moves through the
lifecycle table in :mod:`sessions.session_transitions`; every mutator checks
that table first and returns ``False`` (with a warning) instead of raising
when the move is not allowed.
"""

from __future__ import annotations
from tracking import t

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Tuple

from bays.models import VenueLocation
from pricing.membership import Membership
from pricing.time_slot import format_clock_time
from sessions.models import (
    PaymentStatus,
    SessionQuickAction,
    SessionStatus,
    SessionType,
    quick_actions_for,
)
from sessions.session_transitions import can_transition

logger = logging.getLogger('CustomerSession')


@dataclass
class CustomerSession:
    """
    One customer's booking of one bay.

    Attributes:
        start_time: Scheduled start; reset to the actual start when the session begins
        planned_end_time: Always strictly after ``start_time``
        actual_end_time: Set only once the session is completed
        last_updated: Refreshed by every successful mutation
    """

    session_id: str
    customer_id: str
    customer_name: str
    membership: Optional[Membership]
    bay_id: str
    bay_name: str
    location: VenueLocation
    start_time: datetime
    planned_end_time: datetime
    status: SessionStatus
    session_type: SessionType = SessionType.SIMULATOR
    actual_end_time: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    notes: Optional[str] = None
    total_cost: Optional[float] = None
    payment_status: Optional[PaymentStatus] = None

    def __post_init__(self) -> None:
        if self.planned_end_time <= self.start_time:
            raise ValueError(
                f"Session {self.session_id} must end after it starts "
                f"({self.start_time} -> {self.planned_end_time})"
            )
        if self.last_updated is None:
            self.last_updated = self.start_time

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    @property
    def duration(self) -> timedelta:
        t('sessions.customer_session.CustomerSession.duration')
        return self.planned_end_time - self.start_time

    @property
    def actual_duration(self) -> Optional[timedelta]:
        t('sessions.customer_session.CustomerSession.actual_duration')
        if self.actual_end_time is None:
            return None
        return self.actual_end_time - self.start_time

    @property
    def is_active(self) -> bool:
        t('sessions.customer_session.CustomerSession.is_active')
        return self.status is SessionStatus.ACTIVE

    @property
    def is_scheduled(self) -> bool:
        t('sessions.customer_session.CustomerSession.is_scheduled')
        return self.status is SessionStatus.SCHEDULED

    @property
    def is_completed(self) -> bool:
        t('sessions.customer_session.CustomerSession.is_completed')
        return self.status is SessionStatus.COMPLETED

    @property
    def is_terminal(self) -> bool:
        t('sessions.customer_session.CustomerSession.is_terminal')
        return self.status.is_terminal

    @property
    def time_slot_text(self) -> str:
        t('sessions.customer_session.CustomerSession.time_slot_text')
        return f"{format_clock_time(self.start_time)} - {format_clock_time(self.planned_end_time)}"

    @property
    def location_display_name(self) -> str:
        t('sessions.customer_session.CustomerSession.location_display_name')
        return f"{self.bay_name} • {self.location.display_name}"

    @property
    def quick_actions(self) -> Tuple[SessionQuickAction, ...]:
        t('sessions.customer_session.CustomerSession.quick_actions')
        return quick_actions_for(self.status)

    def time_remaining(self, now: datetime) -> Optional[timedelta]:
        """Time left on an active session; negative once in overtime."""
        t('sessions.customer_session.CustomerSession.time_remaining')
        if not self.is_active:
            return None
        return self.planned_end_time - now

    def time_until_start(self, now: datetime) -> Optional[timedelta]:
        t('sessions.customer_session.CustomerSession.time_until_start')
        if not self.is_scheduled:
            return None
        return self.start_time - now

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def _transition(self, target: SessionStatus, now: datetime) -> bool:
        t('sessions.customer_session.CustomerSession._transition')
        if not can_transition(self.status, target):
            logger.warning(
                f"Session {self.session_id}: cannot move from {self.status.value} to {target.value}"
            )
            return False
        self.status = target
        self.last_updated = now
        return True

    def mark_as_started(self, now: datetime) -> bool:
        """Start a scheduled session at ``now``, keeping its planned length if the end has passed."""
        t('sessions.customer_session.CustomerSession.mark_as_started')
        original_duration = self.duration
        if not self._transition(SessionStatus.ACTIVE, now):
            return False

        self.start_time = now
        if self.planned_end_time <= now:
            self.planned_end_time = now + original_duration
        return True

    def mark_as_completed(self, end_time: datetime) -> bool:
        t('sessions.customer_session.CustomerSession.mark_as_completed')
        if not self._transition(SessionStatus.COMPLETED, end_time):
            return False
        self.actual_end_time = end_time
        return True

    def mark_as_cancelled(self, now: datetime) -> bool:
        t('sessions.customer_session.CustomerSession.mark_as_cancelled')
        return self._transition(SessionStatus.CANCELLED, now)

    def mark_as_no_show(self, now: datetime) -> bool:
        t('sessions.customer_session.CustomerSession.mark_as_no_show')
        return self._transition(SessionStatus.NO_SHOW, now)

    def extend_session(self, additional: timedelta, now: datetime) -> bool:
        t('sessions.customer_session.CustomerSession.extend_session')
        if self.status not in (SessionStatus.SCHEDULED, SessionStatus.ACTIVE):
            logger.warning(f"Session {self.session_id}: cannot extend a {self.status.value} session")
            return False
        if additional <= timedelta(0):
            logger.warning(f"Session {self.session_id}: extension must be positive, got {additional}")
            return False

        self.planned_end_time = self.planned_end_time + additional
        self.last_updated = now
        return True

    def update_customer_info(
        self,
        name: str,
        membership: Optional[Membership],
        now: datetime,
    ) -> bool:
        t('sessions.customer_session.CustomerSession.update_customer_info')
        if not name or not name.strip():
            logger.warning(f"Session {self.session_id}: customer name cannot be empty")
            return False

        self.customer_name = name.strip()
        self.membership = membership
        self.last_updated = now
        return True

    def advance(self, now: datetime) -> Optional[SessionStatus]:
        """
        Apply the time-driven transition due at ``now``, if any.

        Scheduled sessions whose start has arrived become active; active
        sessions past their planned end complete at ``now``. Terminal
        sessions never change.

        Returns:
            The new status when a transition happened, otherwise None
        """
        t('sessions.customer_session.CustomerSession.advance')
        if self.status is SessionStatus.SCHEDULED and now >= self.start_time:
            if self.mark_as_started(now):
                return self.status
        elif self.status is SessionStatus.ACTIVE and now >= self.planned_end_time:
            if self.mark_as_completed(now):
                return self.status
        return None
