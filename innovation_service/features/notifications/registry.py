"""Event kind to handler dispatch.

The dispatcher is the single entry point for the platform's notification
events: it builds the handler for an event kind, runs it, routes its emails
through the recipients' preferences and forwards both queues to the
delivery channels.

Usage:
    dispatcher = get_notification_dispatcher()
    result = await dispatcher.dispatch(
        NotifierType.LOCK_USER,
        {"identity_id": "identity-123"},
        context,
    )
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from innovation_service.core.exceptions import UnknownEventKindError
from innovation_service.core.settings import get_identity_settings, get_notification_settings
from innovation_service.features.notifications.channels import InMemoryEmailTransport, InMemoryNotificationStore
from innovation_service.features.notifications.enums import NotifierType
from innovation_service.features.notifications.handlers import (
    AccountCreationHandler,
    AccountDeletionHandler,
    CollaboratorInviteHandler,
    CollaboratorUpdateHandler,
    DocumentUploadedHandler,
    ExportRequestFeedbackHandler,
    ExportRequestSubmittedHandler,
    IdleSupportAccessorHandler,
    IdleSupportInnovatorHandler,
    IncompleteInnovationRecordHandler,
    InnovationArchiveHandler,
    InnovationDelayedSharedSuggestionHandler,
    InnovationStopSharingHandler,
    InnovationSubmittedHandler,
    LockUserHandler,
    NeedsAssessmentAssessorUpdateHandler,
    NeedsAssessmentCompletedHandler,
    NeedsAssessmentStartedHandler,
    NewAccountHandler,
    NewAnnouncementHandler,
    OrganisationUnitsSuggestionHandler,
    SupportNewAssignAccessorsHandler,
    SupportStatusChangeRequestHandler,
    SupportStatusUpdateHandler,
    SupportSummaryUpdateHandler,
    TaskCreationHandler,
    TaskUpdateHandler,
    ThreadAddFollowersHandler,
    ThreadCreationHandler,
    ThreadMessageCreationHandler,
    TransferCompletedHandler,
    TransferCreationHandler,
    TransferExpirationHandler,
    TransferReminderHandler,
    UnitInactivatedHandler,
    UnitKPIHandler,
    UserEmailAddressUpdatedHandler,
)
from innovation_service.features.notifications.identity import IdentityProviderClient
from innovation_service.features.notifications.links import DeepLinkBuilder
from innovation_service.features.notifications.metrics import (
    notification_emails_queued_total,
    notification_events_total,
    notification_handler_duration_seconds,
    notification_in_app_queued_total,
)
from innovation_service.features.notifications.preferences import PreferenceResolver
from innovation_service.features.notifications.recipients import RecipientsService
from innovation_service.features.notifications.schemas import PAYLOAD_SCHEMAS, DomainContext
from innovation_service.infra.database import get_session_factory
from innovation_service.infra.logging import get_logger, log_context

if TYPE_CHECKING:
    from pydantic import BaseModel

    from innovation_service.features.notifications.channels import EmailTransport, NotificationStore
    from innovation_service.features.notifications.handlers.base import BaseHandler
    from innovation_service.features.notifications.identity import IdentityProvider
    from innovation_service.features.notifications.schemas import NotificationEvent
    from innovation_service.features.notifications.types import EmailQueueItem, InAppQueueItem

    HandlerFactory = type[BaseHandler[Any]]

logger = get_logger(__name__)

HANDLERS: Mapping[NotifierType, HandlerFactory] = {
    handler.kind: handler
    for handler in (
        AccountCreationHandler,
        AccountDeletionHandler,
        LockUserHandler,
        UnitInactivatedHandler,
        UserEmailAddressUpdatedHandler,
        NewAccountHandler,
        NewAnnouncementHandler,
        DocumentUploadedHandler,
        TaskCreationHandler,
        TaskUpdateHandler,
        ThreadCreationHandler,
        ThreadAddFollowersHandler,
        ThreadMessageCreationHandler,
        SupportStatusUpdateHandler,
        SupportNewAssignAccessorsHandler,
        SupportStatusChangeRequestHandler,
        SupportSummaryUpdateHandler,
        InnovationSubmittedHandler,
        NeedsAssessmentStartedHandler,
        NeedsAssessmentCompletedHandler,
        NeedsAssessmentAssessorUpdateHandler,
        OrganisationUnitsSuggestionHandler,
        InnovationDelayedSharedSuggestionHandler,
        ExportRequestSubmittedHandler,
        ExportRequestFeedbackHandler,
        CollaboratorInviteHandler,
        CollaboratorUpdateHandler,
        InnovationStopSharingHandler,
        InnovationArchiveHandler,
        TransferCreationHandler,
        TransferCompletedHandler,
        IncompleteInnovationRecordHandler,
        IdleSupportAccessorHandler,
        IdleSupportInnovatorHandler,
        UnitKPIHandler,
        TransferReminderHandler,
        TransferExpirationHandler,
    )
}

_missing = set(NotifierType) - set(HANDLERS)
if _missing:
    raise RuntimeError(f"Notifier types without a handler: {sorted(_missing)}")


@dataclass(frozen=True)
class DispatchResult:
    """What one dispatch forwarded to the channels."""

    kind: NotifierType
    emails: tuple[EmailQueueItem, ...] = ()
    in_app: tuple[InAppQueueItem, ...] = ()
    suppressed: tuple[EmailQueueItem, ...] = ()


class NotificationDispatcher:
    """Runs one handler per event and forwards its queues.

    Either both queues are forwarded or, when the handler fails, neither is.
    In-app items are saved before any email is sent: a store failure leaves
    both channels untouched, an email transport failure leaves the saved
    in-app items in place.
    """

    def __init__(
        self,
        recipients: RecipientsService,
        links: DeepLinkBuilder,
        identity: IdentityProvider,
        email_transport: EmailTransport,
        notification_store: NotificationStore,
        preferences: PreferenceResolver | None = None,
    ) -> None:
        self.recipients = recipients
        self.links = links
        self.identity = identity
        self.email_transport = email_transport
        self.notification_store = notification_store
        self.preferences = preferences or PreferenceResolver(recipients)

    def create_handler(
        self,
        kind: NotifierType | str,
        payload: BaseModel | Mapping[str, Any],
        context: DomainContext | Mapping[str, Any],
    ) -> BaseHandler[Any]:
        """Build the handler registered for ``kind``.

        Raises:
            UnknownEventKindError: If no handler is registered for ``kind``.
            pydantic.ValidationError: If a mapping payload or context is invalid.
        """
        try:
            handler_cls = HANDLERS[NotifierType(kind)]
        except (ValueError, KeyError) as exc:
            raise UnknownEventKindError(kind) from exc

        if isinstance(payload, Mapping):
            payload = PAYLOAD_SCHEMAS[handler_cls.kind].model_validate(payload)
        if isinstance(context, Mapping):
            context = DomainContext.model_validate(context)

        return handler_cls(
            context,
            payload,
            recipients=self.recipients,
            links=self.links,
            identity=self.identity,
        )

    async def dispatch(
        self,
        kind: NotifierType | str,
        payload: BaseModel | Mapping[str, Any],
        context: DomainContext | Mapping[str, Any],
    ) -> DispatchResult:
        """Run the handler for one event and deliver what it queued.

        Raises:
            UnknownEventKindError: If no handler is registered for ``kind``.
            Exception: Whatever the handler or a channel raised; nothing is
                forwarded when the handler fails.
        """
        handler = self.create_handler(kind, payload, context)
        kind = handler.kind
        with log_context(event_kind=str(kind), notification_event=str(uuid4())):
            start = time.perf_counter()
            try:
                await handler.run()
            except Exception:
                notification_events_total.labels(kind=str(kind), outcome="failed").inc()
                raise
            finally:
                notification_handler_duration_seconds.labels(kind=str(kind)).observe(time.perf_counter() - start)

            routing = await self.preferences.filter_emails(handler.emails)
            in_app = handler.in_app

            if in_app:
                await self.notification_store.save(in_app)
            if routing.sent:
                await self.email_transport.send(routing.sent)

            for item in routing.sent:
                notification_emails_queued_total.labels(template=item.template_id).inc()
            for item in in_app:
                notification_in_app_queued_total.labels(detail=item.context.detail).inc()
            notification_events_total.labels(kind=str(kind), outcome="dispatched").inc()

            logger.info(
                "Notification event dispatched",
                extra={
                    "emails_sent": len(routing.sent),
                    "emails_suppressed": len(routing.suppressed),
                    "in_app_saved": len(in_app),
                },
            )
            return DispatchResult(
                kind=kind,
                emails=tuple(routing.sent),
                in_app=in_app,
                suppressed=tuple(routing.suppressed),
            )

    async def dispatch_event(self, event: NotificationEvent) -> DispatchResult:
        return await self.dispatch(event.kind, event.payload, event.context)


def create_notification_dispatcher(identity: IdentityProvider | None = None) -> NotificationDispatcher:
    """Dispatcher wired from settings, delivering to the in-memory channels.

    Entry points that own real channels build ``NotificationDispatcher``
    directly instead. Pass ``identity`` to control the client's lifetime.
    """
    return NotificationDispatcher(
        recipients=RecipientsService(get_session_factory()),
        links=DeepLinkBuilder(get_notification_settings().web_base_transactional_url),
        identity=identity or IdentityProviderClient.from_settings(get_identity_settings()),
        email_transport=InMemoryEmailTransport(),
        notification_store=InMemoryNotificationStore(),
    )


@lru_cache(maxsize=1)
def get_notification_dispatcher() -> NotificationDispatcher:
    return create_notification_dispatcher()
