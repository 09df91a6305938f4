"""Authorization and user lookup collaborators."""

from .authorization import (
    DEFAULT_POLICY,
    AuthorizationService,
    AuthTarget,
    InstanceTarget,
    Operation,
    RoleBasedAuthorizationService,
    TypeToken,
)
from .users import InMemoryUserDirectory, Role, User, UserService

__all__ = [
    "DEFAULT_POLICY",
    "AuthorizationService",
    "AuthTarget",
    "InMemoryUserDirectory",
    "InstanceTarget",
    "Operation",
    "Role",
    "RoleBasedAuthorizationService",
    "TypeToken",
    "User",
    "UserService",
]
