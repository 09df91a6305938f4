from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from helpdesk.attachments import AttachmentManager, InMemoryFileStorage
from helpdesk.core.config import Settings
from helpdesk.events.dispatcher import EventDispatcher
from helpdesk.events.process import CommentProcessManager
from helpdesk.security.authorization import Operation
from helpdesk.security.users import InMemoryUserDirectory, Role, User
from helpdesk.services.comments import CommentService
from helpdesk.tickets.factory import CommentFactory
from helpdesk.tickets.models import Branch, Ticket, TicketKey
from helpdesk.tickets.repository import InMemoryRepository, InMemoryTicketRepository


class StubAuthorizationService:
    def __init__(self, denied=()):
        self.denied = {Operation(op) for op in denied}
        self.calls = []

    def is_action_permitted(self, operation, target):
        self.calls.append((operation, target))
        return operation not in self.denied


class RecordingNotifier:
    def __init__(self):
        self.notifications = []

    def notify(self, notification):
        self.notifications.append(notification)


@pytest.fixture
def settings():
    return Settings(_env_file=None, attachment_max_size=64)


@pytest.fixture
def author():
    return User(id="u-author", username="alice", roles=(Role.EDITOR, Role.VIEWER))


@pytest.fixture
def user_directory(author):
    return InMemoryUserDirectory([author])


@pytest.fixture
def branch():
    return Branch(id=1, name="Support", key="SUP", default_assignee="u-agent")


@pytest.fixture
def comment_repository():
    return InMemoryRepository()


@pytest.fixture
def ticket_repository(comment_repository):
    return InMemoryTicketRepository(comment_repository)


@pytest.fixture
def ticket(ticket_repository, branch):
    ticket = Ticket(
        id=None,
        key=TicketKey("SUP", 1),
        subject="Printer on fire",
        description="The second floor printer is smoking",
        branch=branch,
        reporter="u-reporter",
        assignee="u-agent",
    )
    ticket_repository.store(ticket)
    return ticket


@pytest.fixture
def comment(ticket, ticket_repository, author):
    comment = CommentFactory().create("First reply", ticket, author)
    ticket.post_new_comment(comment)
    ticket_repository.store(ticket)
    comment.drain_events()
    return comment


@pytest.fixture
def storage():
    return InMemoryFileStorage()


@pytest.fixture
def attachment(comment, storage):
    attachment = AttachmentManager(storage).create_new_attachment("error.log", b"boom", comment)
    comment.drain_events()
    return attachment


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def dispatcher():
    return EventDispatcher()


@pytest.fixture
def process_manager(dispatcher, notifier):
    manager = CommentProcessManager(notifier)
    manager.subscribe(dispatcher)
    return manager


@pytest.fixture
def spies(ticket_repository, comment_repository, storage):
    return SimpleNamespace(
        ticket_repository=Mock(wraps=ticket_repository),
        comment_repository=Mock(wraps=comment_repository),
        attachment_manager=Mock(wraps=AttachmentManager(storage)),
    )


@pytest.fixture
def build_service(spies, user_directory, dispatcher, process_manager, settings):
    def _build(authorization=None, process=None):
        return CommentService(
            ticket_repository=spies.ticket_repository,
            comment_repository=spies.comment_repository,
            comment_factory=CommentFactory(),
            user_service=user_directory,
            attachment_manager=spies.attachment_manager,
            authorization_service=authorization or StubAuthorizationService(),
            dispatcher=dispatcher,
            process_manager=process or process_manager,
            settings=settings,
        )

    return _build


@pytest.fixture
def service(build_service):
    return build_service()


@pytest.fixture
def dispatched(dispatcher):
    names = []
    for name in CommentProcessManager.EVENT_NAMES:
        dispatcher.add_listener(name, lambda event: names.append(event.event_name))
    return names
