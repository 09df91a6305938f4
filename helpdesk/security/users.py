from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Protocol

from helpdesk.errors import UserNotFoundError


class Role(str, Enum):
    """Supported roles."""

    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


@dataclass(frozen=True, slots=True)
class User:
    """Simple representation of a helpdesk user."""

    id: str
    username: str
    roles: tuple[Role, ...] = (Role.VIEWER,)
    email: str | None = None

    def has_role(self, role: Role) -> bool:
        return role in self.roles


class UserService(Protocol):
    def get_user_by_id(self, user_id: str) -> User:
        ...


class InMemoryUserDirectory:
    """User lookup over a fixed set of known users."""

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._users: dict[str, User] = {user.id: user for user in users}

    def add(self, user: User) -> None:
        self._users[user.id] = user

    def get_user_by_id(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return user
