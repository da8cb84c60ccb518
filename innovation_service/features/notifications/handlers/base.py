"""Base class for notification event handlers.

A handler turns one domain event into email and in-app queue items. It never
delivers anything itself: the dispatcher reads ``emails`` and ``in_app`` after
``run()`` completes and forwards them to the channels.

Example:
    class DocumentUploadedHandler(BaseHandler[DocumentUploadedPayload]):
        kind = NotifierType.INNOVATION_DOCUMENT_UPLOADED

        async def handle(self) -> None:
            innovators = await self.resolve_innovators(self.payload.innovation_id)
            self.add_emails(innovators, T.DC01_UPLOADED_DOCUMENT_TO_INNOVATOR, {...},
                            preference_category=NotificationCategory.DOCUMENT)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar
from uuid import uuid4

from pydantic import BaseModel

from innovation_service.features.notifications.enums import ServiceRole
from innovation_service.features.notifications.helpers import NEEDS_ASSESSMENT_UNIT_NAME, fallback_user_name
from innovation_service.features.notifications.templates import validate_email_params
from innovation_service.features.notifications.types import (
    EmailQueueItem,
    EmailRecipient,
    InAppContext,
    InAppQueueItem,
    Recipient,
)
from innovation_service.infra.logging import get_lazy_logger, get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from innovation_service.features.notifications.enums import NotificationCategory, NotifierType
    from innovation_service.features.notifications.identity import IdentityProvider
    from innovation_service.features.notifications.links import DeepLinkBuilder
    from innovation_service.features.notifications.recipients import RecipientsService
    from innovation_service.features.notifications.schemas import DomainContext
    from innovation_service.features.notifications.templates import NotificationTemplate
    from innovation_service.features.notifications.types import InnovationInfo

PayloadT = TypeVar("PayloadT", bound=BaseModel)

EmailTarget = Recipient | EmailRecipient


class HandlerState(StrEnum):
    CREATED = "CREATED"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


def _new_notification_id() -> str:
    return str(uuid4())


class BaseHandler(ABC, Generic[PayloadT]):
    """One handler instance per event.

    Subclasses set ``kind`` and implement ``handle()``. Recipient lookups go
    through the injected ``RecipientsService``; no state survives the run.

    Attributes:
        context: The acting user.
        payload: The validated event payload.
        state: Lifecycle state, CREATED until ``run()`` is awaited.
    """

    kind: ClassVar[NotifierType]

    def __init__(
        self,
        context: DomainContext,
        payload: PayloadT,
        *,
        recipients: RecipientsService,
        links: DeepLinkBuilder,
        identity: IdentityProvider,
        notification_id_factory: Callable[[], str] = _new_notification_id,
    ) -> None:
        self.context = context
        self.payload = payload
        self.recipients = recipients
        self.links = links
        self.identity = identity
        self.state = HandlerState.CREATED

        self._notification_id_factory = notification_id_factory
        self._emails: list[EmailQueueItem] = []
        self._in_app: list[InAppQueueItem] = []
        self._request_user_name: str | None = None

        self.logger = get_logger(type(self).__module__, handler=type(self).__name__)
        self._lazy = get_lazy_logger(type(self).__module__)

    @property
    def emails(self) -> tuple[EmailQueueItem, ...]:
        return tuple(self._emails)

    @property
    def in_app(self) -> tuple[InAppQueueItem, ...]:
        return tuple(self._in_app)

    async def run(self) -> BaseHandler[PayloadT]:
        """Run the handler once and return it with its queues filled.

        Raises:
            Whatever ``handle()`` raises, after moving to FAILED.
        """
        self.state = HandlerState.RUNNING
        try:
            await self.handle()
        except Exception:
            self.state = HandlerState.FAILED
            self.logger.exception(
                "Notification handler failed",
                extra={"emails_queued": len(self._emails), "in_app_queued": len(self._in_app)},
            )
            raise
        self.state = HandlerState.COMPLETED
        self._lazy.debug(
            lambda: f"{type(self).__name__}.run() -> {len(self._emails)} emails, {len(self._in_app)} in-app"
        )
        return self

    @abstractmethod
    async def handle(self) -> None:
        """Resolve recipients and queue notifications for the event."""

    # ========================================================================
    # Queueing
    # ========================================================================

    def add_emails(
        self,
        recipients: EmailTarget | Iterable[EmailTarget] | None,
        template_id: NotificationTemplate,
        params: dict[str, str],
        *,
        preference_category: NotificationCategory | None,
        include_locked: bool = False,
        include_self: bool = False,
    ) -> None:
        """Queue one email per eligible recipient.

        Raises:
            pydantic.ValidationError: If ``params`` do not match the template.
        """
        validated = validate_email_params(template_id, params)
        for recipient in _as_targets(recipients):
            if isinstance(recipient, Recipient):
                if not include_locked and not recipient.is_active:
                    continue
                if not include_self and recipient.identity_id == self.context.identity_id:
                    continue
            self._emails.append(
                EmailQueueItem(
                    template_id=str(template_id),
                    to=recipient,
                    preference_category=preference_category,
                    params=dict(validated),
                    include_locked=include_locked,
                )
            )

    def add_in_app(
        self,
        context: InAppContext,
        recipients: Recipient | Iterable[Recipient | str] | None,
        params: dict[str, str],
        *,
        innovation_id: str | None,
        notification_id: str,
        include_self: bool = False,
    ) -> None:
        """Queue a single in-app notification for every distinct role.

        Nothing is queued when no role remains after dropping the actor.
        """
        role_ids: list[str] = []
        for recipient in _as_targets(recipients):
            role_id = recipient.role_id if isinstance(recipient, Recipient) else recipient
            if not include_self and role_id == self.context.current_role.id:
                continue
            role_ids.append(role_id)
        unique = tuple(dict.fromkeys(role_ids))
        if not unique:
            return
        self._in_app.append(
            InAppQueueItem(
                innovation_id=innovation_id,
                context=context,
                user_role_ids=unique,
                params=dict(params),
                notification_id=notification_id,
            )
        )

    def notify(
        self,
        recipients: list[Recipient],
        template_id: NotificationTemplate,
        *,
        email_params: dict[str, str],
        in_app_context: InAppContext,
        in_app_params: dict[str, str],
        preference_category: NotificationCategory | None,
        innovation_id: str | None,
        notification_id: str,
        include_self: bool = False,
    ) -> None:
        """Queue the email and the in-app notification of one template for the same recipients."""
        if not recipients:
            return
        self.add_emails(
            recipients,
            template_id,
            email_params,
            preference_category=preference_category,
            include_self=include_self,
        )
        self.add_in_app(
            in_app_context,
            recipients,
            in_app_params,
            innovation_id=innovation_id,
            notification_id=notification_id,
            include_self=include_self,
        )

    # ========================================================================
    # Helpers
    # ========================================================================

    def new_notification_id(self) -> str:
        return self._notification_id_factory()

    async def get_user_name(self, identity_id: str | None, role: ServiceRole | None = None) -> str:
        """Display name from the identity provider, or a role based fallback."""
        if identity_id:
            info = await self.identity.get_user_info(identity_id)
            if info and info.display_name:
                return info.display_name
        return fallback_user_name(role or self.context.role)

    async def get_request_user_name(self) -> str:
        if self._request_user_name is None:
            self._request_user_name = await self.get_user_name(self.context.identity_id)
        return self._request_user_name

    def get_request_unit_name(self) -> str:
        if self.context.role == ServiceRole.ASSESSMENT:
            return NEEDS_ASSESSMENT_UNIT_NAME
        return self.context.unit_name or ""

    async def resolve_innovators(self, innovation_id: str, *, only_active: bool = True) -> list[Recipient]:
        """Owner and collaborators of an innovation as innovator recipients."""
        user_ids = await self.recipients.resolve_owner_and_collaborators(innovation_id, only_active=only_active)
        return await self.recipients.resolve_by_role(user_ids, ServiceRole.INNOVATOR)

    async def resolve_owner(self, innovation: InnovationInfo) -> Recipient | None:
        if innovation.owner_id is None:
            return None
        return await self.recipients.resolve_by_role(innovation.owner_id, ServiceRole.INNOVATOR)

    def skip(self, reason: str, **extra: object) -> None:
        """Log a branch that has nothing to notify."""
        self.logger.warning(reason, extra={"event_kind": str(self.kind), **extra})


def _as_targets(
    value: EmailTarget | str | Iterable[EmailTarget | str] | None,
) -> list[EmailTarget | str]:
    if value is None:
        return []
    if isinstance(value, (Recipient, EmailRecipient, str)):
        return [value]
    return list(value)


def group_by_role(recipients: list[Recipient]) -> dict[ServiceRole, list[Recipient]]:
    """Split recipients by role, keeping their order; links differ per role."""
    groups: dict[ServiceRole, list[Recipient]] = {}
    for recipient in recipients:
        groups.setdefault(recipient.role, []).append(recipient)
    return groups
