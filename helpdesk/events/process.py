"""Process manager turning comment activity into ticket notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

from helpdesk.tickets.events import (
    AttachmentAddedToComment,
    AttachmentRemovedFromComment,
    CommentAdded,
    CommentDeleted,
    CommentEvent,
    CommentUpdated,
    DomainEvent,
    TicketEvent,
    TicketStatusChanged,
)

from .dispatcher import EventDispatcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommentNotification:
    """Summary of the changes a request made to a single ticket."""

    ticket_key: str
    subject: str
    recipients: tuple[str, ...]
    changes: tuple[str, ...]
    actor: str | None = None


class Notifier(Protocol):
    def notify(self, notification: CommentNotification) -> None:
        ...


class ProcessManager(Protocol):
    def get_events_history(self) -> Sequence[DomainEvent]:
        ...

    def process(self) -> object:
        ...


class LoggingNotifier:
    def notify(self, notification: CommentNotification) -> None:
        logger.info(
            "Notify %s about %s: %s",
            ", ".join(notification.recipients) or "nobody",
            notification.ticket_key,
            "; ".join(notification.changes),
        )


def describe_event(event: DomainEvent) -> str:
    if isinstance(event, CommentAdded):
        return f"Comment added: {event.content}"
    if isinstance(event, CommentUpdated):
        return f"Comment updated: {event.content}"
    if isinstance(event, CommentDeleted):
        return "Comment deleted"
    if isinstance(event, AttachmentAddedToComment):
        return f"Attachment added: {event.filename}"
    if isinstance(event, AttachmentRemovedFromComment):
        return f"Attachment removed: {event.filename}"
    if isinstance(event, TicketStatusChanged):
        return f"Status changed from {event.old_status.value} to {event.new_status.value}"
    return event.event_name


class CommentProcessManager:
    """Collect comment and ticket events and notify ticket participants."""

    EVENT_NAMES: tuple[str, ...] = (
        CommentAdded.event_name,
        CommentUpdated.event_name,
        CommentDeleted.event_name,
        AttachmentAddedToComment.event_name,
        AttachmentRemovedFromComment.event_name,
        TicketStatusChanged.event_name,
    )

    def __init__(self, notifier: Notifier | None = None) -> None:
        self._notifier = notifier or LoggingNotifier()
        self._history: list[TicketEvent] = []

    def subscribe(self, dispatcher: EventDispatcher) -> None:
        for name in self.EVENT_NAMES:
            dispatcher.add_listener(name, self.handle)

    def handle(self, event: DomainEvent) -> None:
        if isinstance(event, TicketEvent):
            self._history.append(event)

    def get_events_history(self) -> tuple[TicketEvent, ...]:
        return tuple(self._history)

    def process(self) -> list[CommentNotification]:
        grouped: dict[int, list[TicketEvent]] = {}
        for event in self._history:
            grouped.setdefault(id(event.ticket), []).append(event)

        # Events stay in the history until their ticket's notification is sent.
        notifications: list[CommentNotification] = []
        for ticket_ref, events in grouped.items():
            notification = self._build_notification(events)
            self._notifier.notify(notification)
            self._history = [event for event in self._history if id(event.ticket) != ticket_ref]
            notifications.append(notification)
        logger.debug("Processed %d ticket(s) into notifications", len(notifications))
        return notifications

    @staticmethod
    def _build_notification(events: list[TicketEvent]) -> CommentNotification:
        ticket = events[0].ticket
        actor = next((event.author for event in events if isinstance(event, CommentEvent)), None)
        recipients: list[str] = []
        for candidate in (ticket.reporter, ticket.assignee):
            if candidate and candidate != actor and candidate not in recipients:
                recipients.append(candidate)
        return CommentNotification(
            ticket_key=str(ticket.key),
            subject=ticket.subject,
            recipients=tuple(recipients),
            changes=tuple(describe_event(event) for event in events),
            actor=actor,
        )
