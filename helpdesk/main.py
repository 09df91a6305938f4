from __future__ import annotations

import logging
from dataclasses import dataclass, field

from opentelemetry.sdk.trace import TracerProvider

from helpdesk.attachments import AttachmentManager, InMemoryFileStorage
from helpdesk.core.config import Settings, get_settings
from helpdesk.core.logging import configure_logging, init_tracer, shutdown_tracer
from helpdesk.events.dispatcher import EventDispatcher
from helpdesk.events.process import CommentProcessManager, Notifier
from helpdesk.security.authorization import RoleBasedAuthorizationService
from helpdesk.security.users import InMemoryUserDirectory, User
from helpdesk.services.comments import CommentService
from helpdesk.tickets.factory import CommentFactory
from helpdesk.tickets.models import Comment
from helpdesk.tickets.repository import InMemoryRepository, InMemoryTicketRepository


@dataclass(slots=True)
class HelpdeskContainer:
    """Process-wide collaborators shared by every request."""

    settings: Settings
    logger: logging.Logger
    tracer_provider: TracerProvider | None
    comment_repository: InMemoryRepository[Comment]
    ticket_repository: InMemoryTicketRepository
    user_directory: InMemoryUserDirectory
    attachment_manager: AttachmentManager
    dispatcher: EventDispatcher
    process_manager: CommentProcessManager
    comment_factory: CommentFactory = field(default_factory=CommentFactory)

    def comment_service_for(self, user: User) -> CommentService:
        """Build a comment service authorizing as ``user``."""

        return CommentService(
            ticket_repository=self.ticket_repository,
            comment_repository=self.comment_repository,
            comment_factory=self.comment_factory,
            user_service=self.user_directory,
            attachment_manager=self.attachment_manager,
            authorization_service=RoleBasedAuthorizationService(user),
            dispatcher=self.dispatcher,
            process_manager=self.process_manager,
            settings=self.settings,
        )


def bootstrap(settings: Settings | None = None, *, notifier: Notifier | None = None) -> HelpdeskContainer:
    """Configure logging and tracing and wire the in-memory collaborators."""

    settings = settings or get_settings()
    logger = configure_logging(settings)
    tracer_provider = init_tracer(settings)

    comment_repository: InMemoryRepository[Comment] = InMemoryRepository()
    dispatcher = EventDispatcher()
    process_manager = CommentProcessManager(notifier)
    process_manager.subscribe(dispatcher)

    container = HelpdeskContainer(
        settings=settings,
        logger=logger,
        tracer_provider=tracer_provider,
        comment_repository=comment_repository,
        ticket_repository=InMemoryTicketRepository(comment_repository),
        user_directory=InMemoryUserDirectory(),
        attachment_manager=AttachmentManager(InMemoryFileStorage()),
        dispatcher=dispatcher,
        process_manager=process_manager,
    )
    logger.info("%s ready (%s)", settings.app_name, settings.environment)
    return container


def shutdown(container: HelpdeskContainer) -> None:
    shutdown_tracer(container.tracer_provider)
