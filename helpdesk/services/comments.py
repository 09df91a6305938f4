from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Sequence

from opentelemetry import trace
from pydantic import ValidationError as PydanticValidationError

from helpdesk.attachments import AttachmentInput, AttachmentManager
from helpdesk.core.config import Settings, get_settings
from helpdesk.errors import (
    AttachmentNotFoundError,
    CommentNotFoundError,
    InvalidTicketTransitionError,
    PermissionDeniedError,
    TicketNotFoundError,
    ValidationError,
)
from helpdesk.events.dispatcher import EventDispatcher
from helpdesk.events.process import ProcessManager
from helpdesk.security.authorization import (
    AuthorizationService,
    AuthTarget,
    InstanceTarget,
    Operation,
    TypeToken,
)
from helpdesk.security.users import UserService
from helpdesk.tickets.events import AggregateRoot
from helpdesk.tickets.factory import CommentFactory
from helpdesk.tickets.models import Attachment, Comment, Ticket
from helpdesk.tickets.repository import Repository
from helpdesk.tickets.state import TicketStatus

from .commands import (
    CommentCommand,
    RemoveCommentAttachmentCommand,
    RetrieveCommentAttachmentCommand,
    UpdateCommentCommand,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

COMMENT_RESOURCE = TypeToken("Comment")


@dataclass(slots=True)
class TouchedAggregates:
    """Aggregates mutated by one operation, in dispatch order."""

    comment: Comment
    ticket: Ticket | None = None

    def __iter__(self) -> Iterator[AggregateRoot]:
        yield self.comment
        if self.ticket is not None:
            yield self.ticket


class CommentService:
    """Orchestrate comment commands: authorize, load, mutate, persist, dispatch."""

    def __init__(
        self,
        *,
        ticket_repository: Repository[Ticket],
        comment_repository: Repository[Comment],
        comment_factory: CommentFactory,
        user_service: UserService,
        attachment_manager: AttachmentManager,
        authorization_service: AuthorizationService,
        dispatcher: EventDispatcher,
        process_manager: ProcessManager,
        settings: Settings | None = None,
    ) -> None:
        self._ticket_repository = ticket_repository
        self._comment_repository = comment_repository
        self._comment_factory = comment_factory
        self._user_service = user_service
        self._attachment_manager = attachment_manager
        self._authorization_service = authorization_service
        self._dispatcher = dispatcher
        self._process_manager = process_manager
        self._settings = settings or get_settings()

    def load_comment(self, comment_id: int) -> Comment:
        with tracer.start_as_current_span("comments.load_comment"):
            comment = self._load_comment_by(comment_id)
            self._is_granted(Operation.VIEW, InstanceTarget(comment))
            return comment

    def post_new_comment_for_ticket(self, command: CommentCommand) -> Comment:
        with tracer.start_as_current_span("comments.post_new_comment_for_ticket") as span:
            self._is_granted(Operation.CREATE, COMMENT_RESOURCE)
            attachments = self._validate_attachments_input(command.attachments_input)

            ticket = self._load_ticket_by(command.ticket)
            author = self._user_service.get_user_by_id(command.author)  # type: ignore[arg-type]
            status = self._resolve_status(command.ticket_status)
            self._ensure_transition(ticket, status)

            comment = self._comment_factory.create(command.content, ticket, author)
            self._create_attachments(attachments, comment)

            if status is not None:
                ticket.update_status(status)
            ticket.post_new_comment(comment)

            self._ticket_repository.store(ticket)
            span.set_attribute("helpdesk.comment_id", str(comment.id))
            logger.info("Comment %s posted on ticket %s by %s", comment.id, ticket.key, author.id)

            self._dispatch_events(TouchedAggregates(comment=comment, ticket=ticket))
            return comment

    def get_comment_attachment(self, command: RetrieveCommentAttachmentCommand) -> Attachment:
        with tracer.start_as_current_span("comments.get_comment_attachment"):
            comment = self._load_comment_by(command.comment_id)
            self._is_granted(Operation.VIEW, InstanceTarget(comment))
            return self._get_attachment(comment, command.attachment_id)

    def update_ticket_comment(self, command: CommentCommand) -> None:
        with tracer.start_as_current_span("comments.update_ticket_comment"):
            comment = self._load_comment_by(command.id)
            self._is_granted(Operation.EDIT, InstanceTarget(comment))
            attachments = self._validate_attachments_input(command.attachments_input)
            status = self._resolve_status(command.ticket_status)
            self._ensure_transition(comment.ticket, status)

            comment.update_content(command.content)  # type: ignore[arg-type]
            self._create_attachments(attachments, comment)
            touched = self._apply_ticket_status(comment, status)

            self._comment_repository.store(comment)
            logger.info("Comment %s updated", comment.id)

            self._dispatch_events(touched)

    def update_comment_content_and_ticket_status(self, command: UpdateCommentCommand) -> None:
        with tracer.start_as_current_span("comments.update_comment_content_and_ticket_status"):
            comment = self._load_comment_by(command.id)
            self._is_granted(Operation.EDIT, InstanceTarget(comment))
            status = self._resolve_status(command.ticket_status)
            self._ensure_transition(comment.ticket, status)

            comment.update_content(command.content)  # type: ignore[arg-type]
            touched = self._apply_ticket_status(comment, status)

            self._comment_repository.store(comment)
            logger.info("Comment %s updated", comment.id)

            self._dispatch_events(touched)

    def delete_ticket_comment(self, comment_id: int) -> None:
        with tracer.start_as_current_span("comments.delete_ticket_comment"):
            comment = self._load_comment_by(comment_id)
            self._is_granted(Operation.DELETE, InstanceTarget(comment))

            attachments = comment.get_attachments()
            for attachment in attachments:
                self._attachment_manager.delete_attachment(attachment)
                comment.discard_attachment(attachment)
            comment.delete()
            self._comment_repository.remove(comment)
            logger.info("Comment %s deleted with %d attachment(s)", comment.id, len(attachments))

            self._dispatch_events(TouchedAggregates(comment=comment))

    def remove_attachment_from_comment(self, command: RemoveCommentAttachmentCommand) -> None:
        with tracer.start_as_current_span("comments.remove_attachment_from_comment"):
            comment = self._load_comment_by(command.comment_id)
            self._is_granted(Operation.EDIT, InstanceTarget(comment))

            attachment = self._get_attachment(comment, command.attachment_id)
            self._attachment_manager.delete_attachment(attachment)
            comment.remove_attachment(attachment)
            self._comment_repository.store(comment)
            logger.info("Attachment %s removed from comment %s", attachment.id, comment.id)

            self._dispatch_events(TouchedAggregates(comment=comment))

    def _load_comment_by(self, comment_id: int | None) -> Comment:
        comment = self._comment_repository.get(comment_id) if comment_id is not None else None
        if comment is None:
            raise CommentNotFoundError(f"Comment {comment_id} not found")
        return comment

    def _load_ticket_by(self, ticket_id: int | None) -> Ticket:
        ticket = self._ticket_repository.get(ticket_id) if ticket_id is not None else None
        if ticket is None:
            raise TicketNotFoundError(f"Ticket {ticket_id} not found")
        return ticket

    @staticmethod
    def _get_attachment(comment: Comment, attachment_id: str | None) -> Attachment:
        attachment = comment.get_attachment(attachment_id) if attachment_id is not None else None
        if attachment is None:
            raise AttachmentNotFoundError(
                f"Comment {comment.id} has no attachment {attachment_id}"
            )
        return attachment

    def _is_granted(self, operation: Operation, target: AuthTarget) -> None:
        if not self._authorization_service.is_action_permitted(operation, target):
            logger.warning("Denied %s on %s", operation.value, target.resource)
            raise PermissionDeniedError("Not enough permissions.")

    def _validate_attachments_input(self, items: Sequence[Any] | None) -> list[AttachmentInput]:
        if items is None:
            return []
        if isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Sequence):
            raise ValidationError("Attachments input must be a sequence of attachments")

        validated: list[AttachmentInput] = []
        for index, item in enumerate(items):
            if isinstance(item, AttachmentInput):
                attachment = item
            elif isinstance(item, Mapping):
                try:
                    attachment = AttachmentInput.model_validate(dict(item))
                except PydanticValidationError as exc:
                    raise ValidationError(f"Attachment #{index} is malformed: {exc}") from exc
            else:
                raise ValidationError(f"Attachment #{index} must provide a filename and content")
            if len(attachment.content) > self._settings.attachment_max_size:
                raise ValidationError(
                    f"Attachment {attachment.filename!r} exceeds {self._settings.attachment_max_size} bytes"
                )
            validated.append(attachment)
        return validated

    @staticmethod
    def _resolve_status(value: TicketStatus | str | None) -> TicketStatus | None:
        if value is None:
            return None
        try:
            return TicketStatus(value)
        except ValueError as exc:
            raise ValidationError(f"Unknown ticket status: {value!r}") from exc

    @staticmethod
    def _ensure_transition(ticket: Ticket, status: TicketStatus | None) -> None:
        if status is not None and not ticket.can_transition_to(status):
            raise InvalidTicketTransitionError(
                f"Ticket {ticket.key} cannot move from {ticket.status.value} to {status.value}"
            )

    def _create_attachments(self, attachments: list[AttachmentInput], comment: Comment) -> None:
        for each in attachments:
            self._attachment_manager.create_new_attachment(each.filename, each.content, comment)

    @staticmethod
    def _apply_ticket_status(comment: Comment, status: TicketStatus | None) -> TouchedAggregates:
        if status is None:
            return TouchedAggregates(comment=comment)
        ticket = comment.ticket
        ticket.update_status(status)
        return TouchedAggregates(comment=comment, ticket=ticket)

    def _dispatch_events(self, touched: TouchedAggregates) -> None:
        events = [event for aggregate in touched for event in aggregate.drain_events()]
        for event in events:
            self._dispatcher.dispatch(event.event_name, event)

        if self._process_manager.get_events_history():
            self._process_manager.process()
