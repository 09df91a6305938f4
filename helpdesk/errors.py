from __future__ import annotations


class HelpdeskError(RuntimeError):
    """Base error for helpdesk command processing."""


class NotFoundError(HelpdeskError):
    """Raised when a requested entity could not be located."""


class TicketNotFoundError(NotFoundError):
    """Raised when a ticket id does not resolve."""


class CommentNotFoundError(NotFoundError):
    """Raised when a comment id does not resolve."""


class AttachmentNotFoundError(NotFoundError):
    """Raised when a comment holds no attachment with the requested id."""


class UserNotFoundError(NotFoundError):
    """Raised when the user lookup cannot resolve an id."""


class PermissionDeniedError(HelpdeskError):
    """Raised when the authorization service refuses an operation."""


class ValidationError(HelpdeskError, ValueError):
    """Raised for malformed command input, before anything is mutated."""


class InvalidTicketTransitionError(ValidationError):
    """Raised when attempting to move a ticket to an unreachable status."""


class PersistenceError(HelpdeskError):
    """Raised by persistence collaborators; never interpreted by the core."""
