"""Ticket and comment aggregates, their events and persistence contracts."""

from .events import (
    AggregateRoot,
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
from .factory import CommentFactory
from .models import Attachment, Branch, Comment, Ticket, TicketKey
from .repository import InMemoryRepository, InMemoryTicketRepository, Repository
from .state import TicketPriority, TicketStateMachine, TicketStatus

__all__ = [
    "AggregateRoot",
    "Attachment",
    "AttachmentAddedToComment",
    "AttachmentRemovedFromComment",
    "Branch",
    "Comment",
    "CommentAdded",
    "CommentDeleted",
    "CommentEvent",
    "CommentFactory",
    "CommentUpdated",
    "DomainEvent",
    "InMemoryRepository",
    "InMemoryTicketRepository",
    "Repository",
    "Ticket",
    "TicketEvent",
    "TicketKey",
    "TicketPriority",
    "TicketStateMachine",
    "TicketStatus",
    "TicketStatusChanged",
]
