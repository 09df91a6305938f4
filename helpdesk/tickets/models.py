from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from helpdesk.errors import AttachmentNotFoundError, ValidationError

from .events import (
    AggregateRoot,
    AttachmentAddedToComment,
    AttachmentRemovedFromComment,
    CommentDeleted,
    CommentUpdated,
    TicketStatusChanged,
)
from .state import TicketPriority, TicketStateMachine, TicketStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_content(content: str | None) -> str:
    """Return comment content or raise when it is missing or blank."""

    if not isinstance(content, str) or not content.strip():
        raise ValidationError("Comment content must be a non-empty string")
    return content


@dataclass(slots=True)
class Branch:
    """Support branch grouping tickets under a shared key."""

    id: int | None
    name: str
    key: str
    default_assignee: str | None = None
    description: str = ""


@dataclass(frozen=True, slots=True)
class TicketKey:
    """Human readable ticket identifier such as ``SUP-12``."""

    branch_key: str
    sequence_number: int

    @classmethod
    def from_string(cls, value: str) -> TicketKey:
        branch_key, sep, number = value.rpartition("-")
        if not sep or not branch_key or not number.isdigit():
            raise ValidationError(f"Malformed ticket key: {value!r}")
        return cls(branch_key=branch_key, sequence_number=int(number))

    def __str__(self) -> str:
        return f"{self.branch_key}-{self.sequence_number}"


@dataclass(slots=True, eq=False)
class Ticket(AggregateRoot):
    """Aggregate representing a support ticket and its ordered comments."""

    id: int | None
    key: TicketKey
    subject: str
    description: str
    branch: Branch = field(repr=False)
    reporter: str
    assignee: str | None = None
    status: TicketStatus = TicketStatus.NEW
    priority: TicketPriority = TicketPriority.MEDIUM
    comments: list[Comment] = field(default_factory=list, repr=False)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def can_transition_to(self, status: TicketStatus) -> bool:
        return TicketStateMachine.can_transition(self.status, status)

    def update_status(self, status: TicketStatus) -> None:
        TicketStateMachine.assert_transition(self.status, status)
        if status == self.status:
            return
        old_status = self.status
        self.status = status
        self.updated_at = _utcnow()
        self.record_event(TicketStatusChanged(ticket=self, old_status=old_status, new_status=status))

    def post_new_comment(self, comment: Comment) -> None:
        if comment.ticket is not self:
            raise ValidationError("Comment belongs to a different ticket")
        if comment not in self.comments:
            self.comments.append(comment)
        self.updated_at = _utcnow()

    def remove_comment(self, comment: Comment) -> None:
        self.comments = [each for each in self.comments if each is not comment]
        self.updated_at = _utcnow()

    def get_comments(self) -> list[Comment]:
        return list(self.comments)


@dataclass(slots=True, eq=False)
class Comment(AggregateRoot):
    """Aggregate holding a comment posted on a ticket.

    The ticket reference is fixed for the comment's lifetime. Attachments are
    held by id for lookup only; their stored content belongs to the
    attachment manager.
    """

    content: str
    ticket: Ticket = field(repr=False)
    author: str
    id: int | None = None
    attachments: dict[str, Attachment] = field(default_factory=dict, repr=False)
    deleted: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        ensure_content(self.content)

    def update_content(self, content: str) -> None:
        ensure_content(content)
        if content == self.content:
            return
        old_content = self.content
        self.content = content
        self.updated_at = _utcnow()
        self.record_event(
            CommentUpdated(
                ticket=self.ticket,
                comment=self,
                author=self.author,
                old_content=old_content,
                content=content,
            )
        )

    def add_attachment(self, attachment: Attachment) -> None:
        if attachment.comment is not self:
            raise ValidationError("Attachment belongs to a different comment")
        self.attachments[attachment.id] = attachment
        self.updated_at = _utcnow()
        self.record_event(
            AttachmentAddedToComment(
                ticket=self.ticket,
                comment=self,
                author=self.author,
                attachment_id=attachment.id,
                filename=attachment.filename,
            )
        )

    def get_attachment(self, attachment_id: str) -> Attachment | None:
        return self.attachments.get(attachment_id)

    def get_attachments(self) -> list[Attachment]:
        return list(self.attachments.values())

    def remove_attachment(self, attachment: Attachment) -> None:
        if self.attachments.pop(attachment.id, None) is None:
            raise AttachmentNotFoundError(
                f"Comment {self.id} has no attachment {attachment.id}"
            )
        self.updated_at = _utcnow()
        self.record_event(
            AttachmentRemovedFromComment(
                ticket=self.ticket,
                comment=self,
                author=self.author,
                attachment_id=attachment.id,
                filename=attachment.filename,
            )
        )

    def discard_attachment(self, attachment: Attachment) -> None:
        """Drop the reference to content that is already gone, without an event."""

        self.attachments.pop(attachment.id, None)

    def delete(self) -> None:
        """Mark the comment deleted and detach it from its ticket."""

        if self.deleted:
            return
        self.deleted = True
        self.ticket.remove_comment(self)
        self.record_event(CommentDeleted(ticket=self.ticket, comment=self, author=self.author))


@dataclass(slots=True, eq=False)
class Attachment:
    """Reference to file content kept by the attachment manager."""

    id: str
    filename: str
    storage_key: str
    size: int
    comment: Comment = field(repr=False)
    created_at: datetime = field(default_factory=_utcnow)
