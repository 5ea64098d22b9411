"""Command objects accepted by ``CustomerSessionManager.dispatch`` and its read-only snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional, Tuple, Union

from bays.models import VenueLocation
from infrastructure.constants import DEFAULT_CUSTOMER_NAME
from pricing.membership import Membership
from sessions.models import SessionStatus, SessionType, UserBookingState


@dataclass(frozen=True)
class StartSession:
    """Walk-in session that starts immediately."""

    bay_id: str
    bay_name: str
    location: VenueLocation
    duration: Optional[timedelta] = None
    customer_name: str = DEFAULT_CUSTOMER_NAME
    session_type: SessionType = SessionType.SIMULATOR


@dataclass(frozen=True)
class ScheduleSession:
    bay_id: str
    bay_name: str
    location: VenueLocation
    start_time: datetime
    duration: Optional[timedelta] = None
    customer_name: str = DEFAULT_CUSTOMER_NAME
    session_type: SessionType = SessionType.SIMULATOR
    total_cost: Optional[float] = None
    membership: Optional[Membership] = None


@dataclass(frozen=True)
class ExtendSession:
    additional: timedelta


@dataclass(frozen=True)
class EndSession:
    pass


@dataclass(frozen=True)
class CancelSession:
    pass


@dataclass(frozen=True)
class MarkNoShow:
    pass


@dataclass(frozen=True)
class ClearSession:
    pass


SessionCommand = Union[
    StartSession,
    ScheduleSession,
    ExtendSession,
    EndSession,
    CancelSession,
    MarkNoShow,
    ClearSession,
]


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of the session manager handed to listeners and UI code."""

    taken_at: datetime
    booking_state: UserBookingState
    session_id: Optional[str] = None
    status: Optional[SessionStatus] = None
    bay_id: Optional[str] = None
    bay_name: Optional[str] = None
    location: Optional[VenueLocation] = None
    start_time: Optional[datetime] = None
    planned_end_time: Optional[datetime] = None
    time_remaining_text: Optional[str] = None
    time_until_start_text: Optional[str] = None
    history_ids: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_session(self) -> bool:
        return self.session_id is not None
