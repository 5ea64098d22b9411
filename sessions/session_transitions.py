"""State transition table for customer sessions."""

from __future__ import annotations

from typing import Dict, FrozenSet

from tracking import t

from sessions.models import SessionStatus

ALLOWED_TRANSITIONS: Dict[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.SCHEDULED: frozenset(
        {SessionStatus.ACTIVE, SessionStatus.CANCELLED, SessionStatus.NO_SHOW}
    ),
    SessionStatus.ACTIVE: frozenset({SessionStatus.COMPLETED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.CANCELLED: frozenset(),
    SessionStatus.NO_SHOW: frozenset(),
}


def can_transition(current: SessionStatus, target: SessionStatus) -> bool:
    """Return True when ``current -> target`` is a legal lifecycle step."""

    t('sessions.session_transitions.can_transition')
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())
