from __future__ import annotations

from typing import TYPE_CHECKING

from .events import CommentAdded
from .models import Comment, Ticket, ensure_content

if TYPE_CHECKING:  # pragma: no cover - typing only
    from helpdesk.security.users import User


class CommentFactory:
    """Build new comments bound to their ticket and author."""

    def create(self, content: str | None, ticket: Ticket, author: User) -> Comment:
        comment = Comment(content=ensure_content(content), ticket=ticket, author=author.id)
        comment.record_event(
            CommentAdded(ticket=ticket, comment=comment, author=comment.author, content=comment.content)
        )
        return comment
