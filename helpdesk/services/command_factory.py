from __future__ import annotations

from helpdesk.security.users import User
from helpdesk.tickets.models import Branch, Comment, Ticket

from .commands import (
    AssigneeTicketCommand,
    AttachmentCommand,
    CommentCommand,
    CreateTicketCommand,
    UpdateStatusCommand,
    UpdateTicketCommand,
)


class CommandFactory:
    """Snapshot aggregate state into commands for edit forms.

    Builders never touch the aggregates they read from.
    """

    def create_create_ticket_command(
        self, branch: Branch | None = None, reporter: User | None = None
    ) -> CreateTicketCommand:
        command = CreateTicketCommand()
        if branch is not None:
            command.branch = branch
            if branch.default_assignee:
                command.assignee = branch.default_assignee
        if reporter is not None:
            command.reporter = reporter.id
        return command

    def create_update_ticket_command(self, ticket: Ticket) -> UpdateTicketCommand:
        return UpdateTicketCommand(
            id=ticket.id,
            key=str(ticket.key),
            subject=ticket.subject,
            description=ticket.description,
            reporter=ticket.reporter,
            assignee=ticket.assignee,
            status=ticket.status,
            priority=ticket.priority,
        )

    def create_assignee_ticket_command(self, ticket: Ticket) -> AssigneeTicketCommand:
        return AssigneeTicketCommand(id=ticket.id, assignee=ticket.assignee)

    def create_attachment_command(self, ticket: Ticket) -> AttachmentCommand:
        return AttachmentCommand(ticket_id=ticket.id)

    def create_comment_command_for_create(self, ticket: Ticket, author: User) -> CommentCommand:
        return CommentCommand(
            id=None,
            content=None,
            ticket=ticket.id,
            author=author.id,
            ticket_status=ticket.status,
        )

    def create_comment_command_for_update(self, comment: Comment) -> CommentCommand:
        return CommentCommand(
            id=comment.id,
            content=comment.content,
            ticket=comment.ticket.id,
            author=comment.author,
            ticket_status=comment.ticket.status,
            attachment_list=comment.get_attachments(),
        )

    def create_update_status_command_for_view(self, ticket: Ticket) -> UpdateStatusCommand:
        return UpdateStatusCommand(ticket_id=ticket.id, status=ticket.status)
