"""Event dispatch and downstream processing."""

from .dispatcher import EventDispatcher, Listener
from .process import (
    CommentNotification,
    CommentProcessManager,
    LoggingNotifier,
    Notifier,
    ProcessManager,
)

__all__ = [
    "CommentNotification",
    "CommentProcessManager",
    "EventDispatcher",
    "Listener",
    "LoggingNotifier",
    "Notifier",
    "ProcessManager",
]
