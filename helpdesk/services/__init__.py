"""Application services exposed to transport adapters."""

from .command_factory import CommandFactory
from .commands import (
    AssigneeTicketCommand,
    AttachmentCommand,
    CommentCommand,
    CreateTicketCommand,
    RemoveCommentAttachmentCommand,
    RetrieveCommentAttachmentCommand,
    UpdateCommentCommand,
    UpdateStatusCommand,
    UpdateTicketCommand,
)
from .comments import CommentService, TouchedAggregates

__all__ = [
    "AssigneeTicketCommand",
    "AttachmentCommand",
    "CommandFactory",
    "CommentCommand",
    "CommentService",
    "CreateTicketCommand",
    "RemoveCommentAttachmentCommand",
    "RetrieveCommentAttachmentCommand",
    "TouchedAggregates",
    "UpdateCommentCommand",
    "UpdateStatusCommand",
    "UpdateTicketCommand",
]
