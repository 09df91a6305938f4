from __future__ import annotations

from enum import Enum

from helpdesk.errors import InvalidTicketTransitionError


class TicketStatus(str, Enum):
    """Supported states for a ticket's lifecycle."""

    NEW = "new"
    OPEN = "open"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    RESOLVED = "resolved"
    CLOSED = "closed"


class TicketPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_WORKING = {
    TicketStatus.OPEN,
    TicketStatus.PENDING,
    TicketStatus.IN_PROGRESS,
    TicketStatus.ON_HOLD,
    TicketStatus.RESOLVED,
    TicketStatus.CLOSED,
}


class TicketStateMachine:
    """Validate ticket lifecycle transitions."""

    _TRANSITIONS: dict[TicketStatus, set[TicketStatus]] = {
        TicketStatus.NEW: set(_WORKING),
        TicketStatus.OPEN: _WORKING - {TicketStatus.OPEN},
        TicketStatus.PENDING: _WORKING - {TicketStatus.PENDING},
        TicketStatus.IN_PROGRESS: _WORKING - {TicketStatus.IN_PROGRESS},
        TicketStatus.ON_HOLD: _WORKING - {TicketStatus.ON_HOLD},
        TicketStatus.RESOLVED: {TicketStatus.OPEN, TicketStatus.IN_PROGRESS, TicketStatus.CLOSED},
        TicketStatus.CLOSED: {TicketStatus.OPEN},
    }

    @classmethod
    def initial_state(cls) -> TicketStatus:
        return TicketStatus.NEW

    @classmethod
    def can_transition(cls, current: TicketStatus, new: TicketStatus) -> bool:
        if current == new:
            return True
        return new in cls._TRANSITIONS.get(current, set())

    @classmethod
    def assert_transition(cls, current: TicketStatus, new: TicketStatus) -> None:
        if not cls.can_transition(current, new):
            raise InvalidTicketTransitionError(
                f"Invalid ticket status transition: {current.value} -> {new.value}"
            )
