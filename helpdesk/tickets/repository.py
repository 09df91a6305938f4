from __future__ import annotations

import itertools
import logging
from typing import Generic, Protocol, TypeVar

from helpdesk.errors import PersistenceError

from .models import Comment, Ticket

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Repository(Protocol[T]):
    """Persistence access for one aggregate type.

    Storing a ticket must cascade to the comments it holds, and storing a
    comment must flush pending changes of its owning ticket; atomicity of that
    unit of work is the persistence layer's responsibility.
    """

    def get(self, entity_id: int) -> T | None:
        ...

    def store(self, entity: T) -> None:
        ...

    def remove(self, entity: T) -> None:
        ...


class InMemoryRepository(Generic[T]):
    """Dictionary backed repository assigning sequential ids on first store."""

    def __init__(self) -> None:
        self._entities: dict[int, T] = {}
        self._sequence = itertools.count(1)

    def get(self, entity_id: int) -> T | None:
        return self._entities.get(entity_id)

    def store(self, entity: T) -> None:
        if getattr(entity, "id", None) is None:
            entity.id = next(self._sequence)  # type: ignore[attr-defined]
        self._entities[entity.id] = entity  # type: ignore[attr-defined]
        logger.debug("Stored %s %s", type(entity).__name__, entity.id)  # type: ignore[attr-defined]

    def remove(self, entity: T) -> None:
        entity_id = getattr(entity, "id", None)
        if entity_id is None or self._entities.pop(entity_id, None) is None:
            raise PersistenceError(f"{type(entity).__name__} {entity_id} is not stored")
        logger.debug("Removed %s %s", type(entity).__name__, entity_id)

    def __len__(self) -> int:
        return len(self._entities)


class InMemoryTicketRepository(InMemoryRepository[Ticket]):
    """Ticket repository whose ``store`` cascades to the ticket's comments."""

    def __init__(self, comment_repository: InMemoryRepository[Comment]) -> None:
        super().__init__()
        self._comment_repository = comment_repository

    def store(self, entity: Ticket) -> None:
        super().store(entity)
        for comment in entity.comments:
            self._comment_repository.store(comment)
