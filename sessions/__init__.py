"""Customer session lifecycle and the session manager."""

from .models import (
    PaymentStatus,
    SessionQuickAction,
    SessionStatus,
    SessionType,
    UserBookingState,
    quick_actions_for,
)
from .session_transitions import ALLOWED_TRANSITIONS, can_transition
from .customer_session import CustomerSession
from .commands import (
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
from .session_manager import CustomerSessionManager

__all__ = [
    "PaymentStatus",
    "SessionQuickAction",
    "SessionStatus",
    "SessionType",
    "UserBookingState",
    "quick_actions_for",
    "ALLOWED_TRANSITIONS",
    "can_transition",
    "CustomerSession",
    "CancelSession",
    "ClearSession",
    "EndSession",
    "ExtendSession",
    "MarkNoShow",
    "ScheduleSession",
    "SessionCommand",
    "SessionSnapshot",
    "StartSession",
    "CustomerSessionManager",
]
