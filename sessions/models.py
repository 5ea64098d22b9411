"""Enumerations describing customer sessions."""

from __future__ import annotations
from tracking import t

from enum import Enum
from typing import Tuple


class SessionStatus(Enum):
    """Lifecycle states of a customer session"""
    SCHEDULED = "scheduled"    # Booked, waiting for start time
    ACTIVE = "active"          # Customer is on the bay
    COMPLETED = "completed"    # Session ended normally
    CANCELLED = "cancelled"    # Cancelled before start
    NO_SHOW = "no_show"        # Customer never arrived

    @property
    def display_name(self) -> str:
        t('sessions.models.SessionStatus.display_name')
        if self is SessionStatus.NO_SHOW:
            return "No Show"
        return self.value.capitalize()

    @property
    def is_terminal(self) -> bool:
        t('sessions.models.SessionStatus.is_terminal')
        return self in (SessionStatus.COMPLETED, SessionStatus.CANCELLED, SessionStatus.NO_SHOW)


class SessionType(Enum):
    SIMULATOR = "simulator"
    LESSON = "lesson"
    EVENT = "event"
    TOURNAMENT = "tournament"

    @property
    def display_name(self) -> str:
        t('sessions.models.SessionType.display_name')
        return {
            SessionType.SIMULATOR: "Simulator Session",
            SessionType.LESSON: "Golf Lesson",
            SessionType.EVENT: "Special Event",
            SessionType.TOURNAMENT: "Tournament",
        }[self]


class PaymentStatus(Enum):
    PENDING = "pending"
    AUTHORIZED = "authorized"
    CHARGED = "charged"
    REFUNDED = "refunded"
    FAILED = "failed"

    @property
    def display_name(self) -> str:
        t('sessions.models.PaymentStatus.display_name')
        return {
            PaymentStatus.PENDING: "Payment Pending",
            PaymentStatus.AUTHORIZED: "Payment Authorized",
            PaymentStatus.CHARGED: "Payment Complete",
            PaymentStatus.REFUNDED: "Refunded",
            PaymentStatus.FAILED: "Payment Failed",
        }[self]


class UserBookingState(Enum):
    """What the customer is doing right now, derived from the current session."""
    CURRENTLY_PLAYING = "currently_playing"
    UPCOMING_BOOKING = "upcoming_booking"
    WALK_IN = "walk_in"

    @property
    def display_text(self) -> str:
        t('sessions.models.UserBookingState.display_text')
        return {
            UserBookingState.CURRENTLY_PLAYING: "Currently Playing",
            UserBookingState.UPCOMING_BOOKING: "Upcoming Booking",
            UserBookingState.WALK_IN: "Walk-in",
        }[self]

    @classmethod
    def for_status(cls, status: SessionStatus) -> "UserBookingState":
        t('sessions.models.UserBookingState.for_status')
        if status is SessionStatus.ACTIVE:
            return cls.CURRENTLY_PLAYING
        if status is SessionStatus.SCHEDULED:
            return cls.UPCOMING_BOOKING
        return cls.WALK_IN


class SessionQuickAction(Enum):
    """Shortcuts offered next to the current session."""
    EXTEND_TIME = "extend_time"
    ORDER_FOOD = "order_food"
    GET_HELP = "get_help"
    PRE_ORDER = "pre_order"
    VIEW_DETAILS = "view_details"
    MODIFY = "modify"

    @property
    def title(self) -> str:
        t('sessions.models.SessionQuickAction.title')
        return _QUICK_ACTION_TITLES[self]


_QUICK_ACTION_TITLES = {
    SessionQuickAction.EXTEND_TIME: "Extend Time",
    SessionQuickAction.ORDER_FOOD: "Order F&B",
    SessionQuickAction.GET_HELP: "Get Help",
    SessionQuickAction.PRE_ORDER: "Pre-Order",
    SessionQuickAction.VIEW_DETAILS: "Bay Details",
    SessionQuickAction.MODIFY: "Modify",
}


def quick_actions_for(status: SessionStatus) -> Tuple[SessionQuickAction, ...]:
    t('sessions.models.quick_actions_for')
    if status is SessionStatus.ACTIVE:
        return (
            SessionQuickAction.EXTEND_TIME,
            SessionQuickAction.ORDER_FOOD,
            SessionQuickAction.GET_HELP,
        )
    if status is SessionStatus.SCHEDULED:
        return (
            SessionQuickAction.PRE_ORDER,
            SessionQuickAction.VIEW_DETAILS,
            SessionQuickAction.MODIFY,
        )
    return ()
