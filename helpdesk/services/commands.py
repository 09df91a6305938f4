"""Command objects describing one requested operation each.

Commands only carry data. Forms and API adapters fill them field by field,
so every field is optional; the services validate what they need.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from helpdesk.tickets.models import Attachment, Branch
from helpdesk.tickets.state import TicketPriority, TicketStatus


@dataclass(slots=True)
class CommentCommand:
    id: int | None = None
    content: str | None = None
    ticket: int | None = None
    author: str | None = None
    ticket_status: TicketStatus | str | None = None
    attachments_input: Sequence[Any] | None = None
    attachment_list: list[Attachment] = field(default_factory=list)


@dataclass(slots=True)
class UpdateCommentCommand:
    id: int | None = None
    content: str | None = None
    ticket_status: TicketStatus | str | None = None


@dataclass(slots=True)
class RetrieveCommentAttachmentCommand:
    comment_id: int | None = None
    attachment_id: str | None = None


@dataclass(slots=True)
class RemoveCommentAttachmentCommand:
    comment_id: int | None = None
    attachment_id: str | None = None


@dataclass(slots=True)
class CreateTicketCommand:
    branch: Branch | None = None
    subject: str | None = None
    description: str | None = None
    reporter: str | None = None
    assignee: str | None = None
    priority: TicketPriority = TicketPriority.MEDIUM
    status: TicketStatus = TicketStatus.NEW
    attachments_input: Sequence[Any] | None = None


@dataclass(slots=True)
class UpdateTicketCommand:
    id: int | None = None
    key: str | None = None
    subject: str | None = None
    description: str | None = None
    reporter: str | None = None
    assignee: str | None = None
    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    attachments_input: Sequence[Any] | None = None


@dataclass(slots=True)
class AssigneeTicketCommand:
    id: int | None = None
    assignee: str | None = None


@dataclass(slots=True)
class AttachmentCommand:
    ticket_id: int | None = None
    attachments_input: Sequence[Any] | None = None


@dataclass(slots=True)
class UpdateStatusCommand:
    ticket_id: int | None = None
    status: TicketStatus | None = None
