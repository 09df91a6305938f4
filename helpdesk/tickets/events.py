"""Domain events recorded by the ticket and comment aggregates.

Events are immutable facts. Aggregates buffer them while they are mutated and
the orchestrating service drains the buffers once the change has been
persisted, forwarding each event to the dispatcher under its ``event_name``.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, ClassVar

from .state import TicketStatus

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .models import Comment, Ticket


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainEvent:
    """Base class for every recorded event."""

    event_name: ClassVar[str] = "domain.event"

    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True, slots=True, kw_only=True)
class TicketEvent(DomainEvent):
    ticket: Ticket = field(repr=False, compare=False)

    @property
    def ticket_key(self) -> str:
        return str(self.ticket.key)


@dataclass(frozen=True, slots=True, kw_only=True)
class TicketStatusChanged(TicketEvent):
    event_name: ClassVar[str] = "ticket.status_changed"

    old_status: TicketStatus
    new_status: TicketStatus


@dataclass(frozen=True, slots=True, kw_only=True)
class CommentEvent(TicketEvent):
    comment: Comment = field(repr=False, compare=False)
    author: str

    @property
    def comment_id(self) -> int | None:
        # Ids are assigned on persistence, which happens before dispatch.
        return self.comment.id


@dataclass(frozen=True, slots=True, kw_only=True)
class CommentAdded(CommentEvent):
    event_name: ClassVar[str] = "comment.added"

    content: str


@dataclass(frozen=True, slots=True, kw_only=True)
class CommentUpdated(CommentEvent):
    event_name: ClassVar[str] = "comment.updated"

    old_content: str
    content: str


@dataclass(frozen=True, slots=True, kw_only=True)
class CommentDeleted(CommentEvent):
    event_name: ClassVar[str] = "comment.deleted"


@dataclass(frozen=True, slots=True, kw_only=True)
class AttachmentAddedToComment(CommentEvent):
    event_name: ClassVar[str] = "comment.attachment_added"

    attachment_id: str
    filename: str


@dataclass(frozen=True, slots=True, kw_only=True)
class AttachmentRemovedFromComment(CommentEvent):
    event_name: ClassVar[str] = "comment.attachment_removed"

    attachment_id: str
    filename: str


@dataclass(slots=True, eq=False)
class AggregateRoot:
    """Owns the buffer of events recorded while the aggregate is mutated."""

    _recorded_events: list[DomainEvent] = field(
        default_factory=list, init=False, repr=False, compare=False
    )

    def record_event(self, event: DomainEvent) -> None:
        self._recorded_events.append(event)

    @property
    def recorded_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._recorded_events)

    def drain_events(self) -> list[DomainEvent]:
        """Return recorded events in order and empty the buffer."""

        drained = self._recorded_events
        self._recorded_events = []
        return drained
