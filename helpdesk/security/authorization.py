"""Authorization decisions for comment and ticket operations.

The gate accepts either a loaded aggregate (``InstanceTarget``) or, when no
instance exists yet, a type token naming the resource (``TypeToken``). Both
variants carry a ``kind`` tag so implementations can branch on it directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Literal, Mapping, Protocol, Union

from .users import Role, User


class Operation(str, Enum):
    VIEW = "VIEW"
    CREATE = "CREATE"
    EDIT = "EDIT"
    DELETE = "DELETE"


@dataclass(frozen=True, slots=True)
class InstanceTarget:
    kind: ClassVar[Literal["instance"]] = "instance"

    aggregate: object

    @property
    def resource(self) -> str:
        return type(self.aggregate).__name__


@dataclass(frozen=True, slots=True)
class TypeToken:
    kind: ClassVar[Literal["type"]] = "type"

    name: str

    @property
    def resource(self) -> str:
        return self.name


AuthTarget = Union[InstanceTarget, TypeToken]


class AuthorizationService(Protocol):
    def is_action_permitted(self, operation: Operation, target: AuthTarget) -> bool:
        ...


_ROLE_RANK: dict[Role, int] = {Role.VIEWER: 1, Role.EDITOR: 2, Role.ADMIN: 3}

DEFAULT_POLICY: Mapping[tuple[str, Operation], Role] = {
    ("Comment", Operation.VIEW): Role.VIEWER,
    ("Comment", Operation.CREATE): Role.VIEWER,
    ("Comment", Operation.EDIT): Role.EDITOR,
    ("Comment", Operation.DELETE): Role.ADMIN,
    ("Ticket", Operation.VIEW): Role.VIEWER,
    ("Ticket", Operation.CREATE): Role.VIEWER,
    ("Ticket", Operation.EDIT): Role.EDITOR,
    ("Ticket", Operation.DELETE): Role.ADMIN,
}

_OWNER_OPERATIONS = frozenset({Operation.VIEW, Operation.EDIT, Operation.DELETE})


class RoleBasedAuthorizationService:
    """Grant operations from the current user's roles.

    Admins are always granted. Otherwise the policy names the minimum role
    per (resource, operation); authors may additionally view, edit and delete
    their own instances. Unknown resources are denied.
    """

    def __init__(self, user: User, policy: Mapping[tuple[str, Operation], Role] | None = None) -> None:
        self._user = user
        self._policy = policy if policy is not None else DEFAULT_POLICY

    @property
    def user(self) -> User:
        return self._user

    def is_action_permitted(self, operation: Operation, target: AuthTarget) -> bool:
        operation = Operation(operation)
        if self._user.has_role(Role.ADMIN):
            return True
        if target.kind == "instance" and operation in _OWNER_OPERATIONS:
            if getattr(target.aggregate, "author", None) == self._user.id:
                return True
        required = self._policy.get((target.resource, operation))
        if required is None:
            return False
        rank = max((_ROLE_RANK.get(role, 0) for role in self._user.roles), default=0)
        return rank >= _ROLE_RANK[required]
