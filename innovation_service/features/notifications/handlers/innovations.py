"""Handlers for innovation management: collaborators, sharing, archiving and ownership transfers."""

from __future__ import annotations

from innovation_service.features.notifications.enums import (
    InnovationCollaboratorStatus,
    InnovationTransferStatus,
    NotificationCategory,
    NotifierType,
    ServiceRole,
)
from innovation_service.features.notifications.handlers.base import BaseHandler, PayloadT, group_by_role
from innovation_service.features.notifications.schemas import (
    CollaboratorInvitePayload,
    CollaboratorUpdatePayload,
    InnovationArchivePayload,
    InnovationStopSharingPayload,
    TransferExpirationPayload,
    TransferPayload,
    TransferReminderPayload,
)
from innovation_service.features.notifications.templates import NotificationTemplate as T
from innovation_service.features.notifications.types import (
    EmailRecipient,
    InAppContext,
    InnovationInfo,
    Recipient,
    TransferInfo,
)

INNOVATION_MANAGEMENT = NotificationCategory.INNOVATION_MANAGEMENT
AUTOMATIC = NotificationCategory.AUTOMATIC


def _context(template: T, entity_id: str) -> InAppContext:
    return InAppContext(type=INNOVATION_MANAGEMENT, detail=template, id=entity_id)


# ============================================================================
# Collaborators
# ============================================================================


class CollaboratorInviteHandler(BaseHandler[CollaboratorInvitePayload]):
    """An innovator invited someone to collaborate.

    Invitees with a platform account get an email and an in-app linking to
    the invitation; anyone else gets an email asking them to sign up.
    """

    kind = NotifierType.COLLABORATOR_INVITE

    async def handle(self) -> None:
        collaborator = await self.recipients.collaboration_info(self.payload.collaborator_id)
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        requester_name = await self.get_request_user_name()

        if collaborator.user_id is None:
            self.add_emails(
                EmailRecipient(email=collaborator.email),
                T.MC02_COLLABORATOR_INVITE_NEW_USER,
                {
                    "innovation_name": innovation.name,
                    "innovator_name": requester_name,
                    "create_account_url": self.links.create_account_url(),
                },
                preference_category=INNOVATION_MANAGEMENT,
            )
            return

        invitee = await self.recipients.resolve_by_role(collaborator.user_id, ServiceRole.INNOVATOR)
        if invitee is None:
            self.skip("Invited user has no innovator role", user_id=collaborator.user_id)
            return

        notification_id = self.new_notification_id()
        self.notify(
            [invitee],
            T.MC01_COLLABORATOR_INVITE_EXISTING_USER,
            email_params={
                "innovation_name": innovation.name,
                "innovator_name": requester_name,
                "invitation_url": self.links.collaborator_info_url(
                    ServiceRole.INNOVATOR, innovation.id, collaborator.collaborator_id, notification_id
                ),
            },
            in_app_context=_context(T.MC01_COLLABORATOR_INVITE_EXISTING_USER, collaborator.collaborator_id),
            in_app_params={
                "innovationName": innovation.name,
                "requestUserName": requester_name,
                "collaboratorId": collaborator.collaborator_id,
            },
            preference_category=INNOVATION_MANAGEMENT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class CollaboratorUpdateHandler(BaseHandler[CollaboratorUpdatePayload]):
    """A collaboration changed status; who hears about it depends on the new status."""

    kind = NotifierType.COLLABORATOR_UPDATE

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)

        match self.payload.collaborator.status:
            case InnovationCollaboratorStatus.ACTIVE:
                await self._to_owner(innovation, T.MC04_COLLABORATOR_UPDATE_ACCEPTS_INVITE)
            case InnovationCollaboratorStatus.DECLINED:
                await self._to_owner(innovation, T.MC05_COLLABORATOR_UPDATE_DECLINES_INVITE)
            case InnovationCollaboratorStatus.CANCELLED:
                await self._to_collaborator(innovation, T.MC03_COLLABORATOR_UPDATE_CANCEL_INVITE)
            case InnovationCollaboratorStatus.REMOVED:
                await self._to_collaborator(innovation, T.MC06_COLLABORATOR_UPDATE_REMOVED_COLLABORATOR)
            case InnovationCollaboratorStatus.LEFT:
                await self._left(innovation)
            case status:
                self.skip("No notification for collaborator status", collaborator_status=str(status))

    async def _in_app_params(self, innovation: InnovationInfo) -> dict[str, str]:
        return {
            "collaboratorId": self.payload.collaborator.id,
            "innovationName": innovation.name,
            "requestUserName": await self.get_request_user_name(),
        }

    async def _to_owner(self, innovation: InnovationInfo, template: T) -> None:
        owner = await self.resolve_owner(innovation)
        if owner is None:
            self.skip("Innovation has no owner to notify", innovation_id=innovation.id)
            return
        notification_id = self.new_notification_id()
        self.notify(
            [owner],
            template,
            email_params={
                "innovation_name": innovation.name,
                "innovator_name": await self.get_request_user_name(),
                "manage_collaborators_url": self.links.manage_collaborators_url(innovation.id, notification_id),
            },
            in_app_context=_context(template, self.payload.collaborator.id),
            in_app_params=await self._in_app_params(innovation),
            preference_category=INNOVATION_MANAGEMENT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )

    async def _to_collaborator(self, innovation: InnovationInfo, template: T) -> None:
        collaborator = await self.recipients.collaboration_info(self.payload.collaborator.id)
        email_params = {"innovation_name": innovation.name, "innovator_name": await self.get_request_user_name()}

        recipient = None
        if collaborator.user_id:
            recipient = await self.recipients.resolve_by_role(collaborator.user_id, ServiceRole.INNOVATOR)

        if recipient is None:
            # invitations to people without an account only reach their inbox
            if template == T.MC03_COLLABORATOR_UPDATE_CANCEL_INVITE:
                self.add_emails(
                    EmailRecipient(email=collaborator.email),
                    template,
                    email_params,
                    preference_category=INNOVATION_MANAGEMENT,
                )
            else:
                self.skip("Collaborator has no innovator role", collaborator_id=collaborator.collaborator_id)
            return

        self.notify(
            [recipient],
            template,
            email_params=email_params,
            in_app_context=_context(template, collaborator.collaborator_id),
            in_app_params=await self._in_app_params(innovation),
            preference_category=INNOVATION_MANAGEMENT,
            innovation_id=innovation.id,
            notification_id=self.new_notification_id(),
        )

    async def _left(self, innovation: InnovationInfo) -> None:
        innovators = await self.resolve_innovators(innovation.id)
        notification_id = self.new_notification_id()
        self.notify(
            innovators,
            T.MC07_COLLABORATOR_UPDATE_COLLABORATOR_LEFT_TO_INNOVATORS,
            email_params={
                "innovation_name": innovation.name,
                "innovator_name": await self.get_request_user_name(),
                "manage_collaborators_url": self.links.manage_collaborators_url(innovation.id, notification_id),
            },
            in_app_context=_context(
                T.MC07_COLLABORATOR_UPDATE_COLLABORATOR_LEFT_TO_INNOVATORS, self.payload.collaborator.id
            ),
            in_app_params=await self._in_app_params(innovation),
            preference_category=INNOVATION_MANAGEMENT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )

        leaver = await self.recipients.resolve_by_role(self.context.id, ServiceRole.INNOVATOR)
        if leaver is None:
            return
        self.notify(
            [leaver],
            T.MC08_COLLABORATOR_UPDATE_COLLABORATOR_LEFT_TO_SELF,
            email_params={"innovation_name": innovation.name},
            in_app_context=_context(T.MC08_COLLABORATOR_UPDATE_COLLABORATOR_LEFT_TO_SELF, self.payload.collaborator.id),
            in_app_params={"collaboratorId": self.payload.collaborator.id, "innovationName": innovation.name},
            preference_category=INNOVATION_MANAGEMENT,
            innovation_id=innovation.id,
            notification_id=self.new_notification_id(),
            include_self=True,
        )


# ============================================================================
# Sharing and archiving
# ============================================================================


class InnovationStopSharingHandler(BaseHandler[InnovationStopSharingPayload]):
    """The innovation stopped being shared with an organisation."""

    kind = NotifierType.INNOVATION_STOP_SHARING

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        organisation = await self.recipients.organisation_info(self.payload.organisation_id)

        owner = await self.resolve_owner(innovation)
        if owner is not None:
            notification_id = self.new_notification_id()
            self.notify(
                [owner],
                T.SH04_INNOVATION_STOPPED_SHARING_WITH_INDIVIDUAL_ORG_TO_OWNER,
                email_params={
                    "innovation_name": innovation.name,
                    "organisation_name": organisation.name,
                    "data_sharing_preferences_url": self.links.data_sharing_preferences_url(
                        ServiceRole.INNOVATOR, innovation.id, notification_id
                    ),
                },
                in_app_context=_context(T.SH04_INNOVATION_STOPPED_SHARING_WITH_INDIVIDUAL_ORG_TO_OWNER, innovation.id),
                in_app_params={"innovationName": innovation.name, "organisationName": organisation.name},
                preference_category=INNOVATION_MANAGEMENT,
                innovation_id=innovation.id,
                notification_id=notification_id,
                include_self=True,
            )

        if self.payload.affected_users is None:
            return
        affected = await self.recipients.resolve_by_role_ids(self.payload.affected_users.role_ids)
        self.notify(
            affected,
            T.SH05_INNOVATION_STOPPED_SHARING_WITH_INDIVIDUAL_ORG_TO_QA_A,
            email_params={"innovation_name": innovation.name, "organisation_name": organisation.name},
            in_app_context=_context(T.SH05_INNOVATION_STOPPED_SHARING_WITH_INDIVIDUAL_ORG_TO_QA_A, innovation.id),
            in_app_params={"innovationName": innovation.name},
            preference_category=INNOVATION_MANAGEMENT,
            innovation_id=innovation.id,
            notification_id=self.new_notification_id(),
        )


class InnovationArchiveHandler(BaseHandler[InnovationArchivePayload]):
    """The owner archived an innovation.

    The owner gets a receipt, active collaborators are told, and users
    assigned at archive time get the owner's message.
    """

    kind = NotifierType.INNOVATION_ARCHIVE

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)

        owner = await self.resolve_owner(innovation)
        if owner is not None:
            self.notify(
                [owner],
                T.AI01_INNOVATION_ARCHIVED_TO_SELF,
                email_params={"innovation_name": innovation.name},
                in_app_context=_context(T.AI01_INNOVATION_ARCHIVED_TO_SELF, innovation.id),
                in_app_params={"innovationName": innovation.name},
                preference_category=INNOVATION_MANAGEMENT,
                innovation_id=innovation.id,
                notification_id=self.new_notification_id(),
                include_self=True,
            )

        collaborators = [r for r in await self.resolve_innovators(innovation.id) if r.user_id != innovation.owner_id]
        notification_id = self.new_notification_id()
        self.notify(
            collaborators,
            T.AI02_INNOVATION_ARCHIVED_TO_COLLABORATORS,
            email_params={
                "innovation_name": innovation.name,
                "archived_url": self.links.innovation_overview_url(
                    ServiceRole.INNOVATOR, innovation.id, notification_id
                ),
            },
            in_app_context=_context(T.AI02_INNOVATION_ARCHIVED_TO_COLLABORATORS, innovation.id),
            in_app_params={"innovationName": innovation.name},
            preference_category=INNOVATION_MANAGEMENT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )

        if self.payload.affected_users is None:
            return
        affected = await self.recipients.resolve_by_role_ids(self.payload.affected_users.role_ids)
        notification_id = self.new_notification_id()
        for role, group in group_by_role(affected).items():
            archived_url = self.links.innovation_overview_url(role, innovation.id, notification_id)
            self.notify(
                group,
                T.AI03_INNOVATION_ARCHIVED_TO_ENGAGING_QA_A,
                email_params={
                    "innovation_name": innovation.name,
                    "archived_url": archived_url,
                    "comment": self.payload.message,
                },
                in_app_context=_context(T.AI03_INNOVATION_ARCHIVED_TO_ENGAGING_QA_A, innovation.id),
                in_app_params={"innovationName": innovation.name, "archivedUrl": archived_url},
                preference_category=INNOVATION_MANAGEMENT,
                innovation_id=innovation.id,
                notification_id=notification_id,
            )


# ============================================================================
# Ownership transfers
# ============================================================================


class _TransferHandler(BaseHandler[PayloadT]):
    async def _target_recipient(self, email: str) -> tuple[Recipient | None, str | None]:
        """Innovator recipient behind the transfer email, and its identity id when registered."""
        target = await self.identity.get_user_info_by_email(email)
        if target is None:
            return None, None
        user_id = await self.recipients.identity_id_to_user_id(target.identity_id)
        if user_id is None:
            return None, target.identity_id
        return await self.recipients.resolve_by_role(user_id, ServiceRole.INNOVATOR), target.identity_id


class TransferCreationHandler(_TransferHandler[TransferPayload]):
    kind = NotifierType.INNOVATION_TRANSFER_OWNERSHIP_CREATION

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        transfer = await self.recipients.transfer_info(self.payload.transfer_id)
        previous_owner = await self.get_user_name(innovation.owner_identity_id, ServiceRole.INNOVATOR)

        target, target_identity_id = await self._target_recipient(transfer.email)
        if target_identity_id is None:
            self.add_emails(
                EmailRecipient(email=transfer.email),
                T.TO01_TRANSFER_OWNERSHIP_NEW_USER,
                {
                    "innovator_name": previous_owner,
                    "innovation_name": innovation.name,
                    "create_account_url": self.links.create_account_url(),
                },
                preference_category=INNOVATION_MANAGEMENT,
            )
            return
        if target is None:
            self.skip("Transfer target has no innovator role", identity_id=target_identity_id)
            return

        notification_id = self.new_notification_id()
        self.notify(
            [target],
            T.TO02_TRANSFER_OWNERSHIP_EXISTING_USER,
            email_params={
                "innovator_name": previous_owner,
                "innovation_name": innovation.name,
                "dashboard_url": self.links.dashboard_url(ServiceRole.INNOVATOR, notification_id),
            },
            in_app_context=_context(T.TO02_TRANSFER_OWNERSHIP_EXISTING_USER, transfer.id),
            in_app_params={"innovationName": innovation.name, "transferId": transfer.id},
            preference_category=INNOVATION_MANAGEMENT,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )


class TransferCompletedHandler(_TransferHandler[TransferPayload]):
    """A transfer was accepted, declined or cancelled."""

    kind = NotifierType.INNOVATION_TRANSFER_OWNERSHIP_COMPLETED

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        transfer = await self.recipients.transfer_info(self.payload.transfer_id)
        owner_name = await self.get_user_name(innovation.owner_identity_id, ServiceRole.INNOVATOR)

        match transfer.status:
            case InnovationTransferStatus.COMPLETED:
                await self._completed(innovation, transfer, owner_name)
            case InnovationTransferStatus.DECLINED:
                await self._declined(innovation, transfer)
            case InnovationTransferStatus.CANCELED:
                await self._canceled(innovation, transfer, owner_name)
            case status:
                self.skip("No notification for transfer status", transfer_status=str(status))

    async def _completed(self, innovation: InnovationInfo, transfer: TransferInfo, new_owner_name: str) -> None:
        previous_owner = await self.recipients.resolve_by_role(transfer.owner_id, ServiceRole.INNOVATOR)
        previous_owner_name = await self.get_user_name(
            previous_owner.identity_id if previous_owner else None, ServiceRole.INNOVATOR
        )
        email_params = {"innovation_name": innovation.name, "new_innovation_owner": new_owner_name}

        if previous_owner is not None:
            self.notify(
                [previous_owner],
                T.TO06_TRANSFER_OWNERSHIP_ACCEPTS_PREVIOUS_OWNER,
                email_params=email_params,
                in_app_context=_context(T.TO06_TRANSFER_OWNERSHIP_ACCEPTS_PREVIOUS_OWNER, transfer.id),
                in_app_params={"innovationName": innovation.name, "newInnovationOwner": new_owner_name},
                preference_category=INNOVATION_MANAGEMENT,
                innovation_id=innovation.id,
                notification_id=self.new_notification_id(),
            )

        assigned = await self.recipients.resolve_assigned_recipients(innovation.id)
        self.notify(
            assigned,
            T.TO07_TRANSFER_OWNERSHIP_ACCEPTS_ASSIGNED_ACCESSORS,
            email_params=email_params,
            in_app_context=_context(T.TO07_TRANSFER_OWNERSHIP_ACCEPTS_ASSIGNED_ACCESSORS, transfer.id),
            in_app_params={
                "oldInnovationOwnerName": previous_owner_name,
                "innovationName": innovation.name,
                "newInnovationOwnerName": new_owner_name,
            },
            preference_category=INNOVATION_MANAGEMENT,
            innovation_id=innovation.id,
            notification_id=self.new_notification_id(),
        )

    async def _declined(self, innovation: InnovationInfo, transfer: TransferInfo) -> None:
        previous_owner = await self.recipients.resolve_by_role(transfer.owner_id, ServiceRole.INNOVATOR)
        if previous_owner is None:
            self.skip("Transfer author has no innovator role", user_id=transfer.owner_id)
            return
        _, target_identity_id = await self._target_recipient(transfer.email)
        target_name = await self.get_user_name(target_identity_id, ServiceRole.INNOVATOR)

        self.notify(
            [previous_owner],
            T.TO08_TRANSFER_OWNERSHIP_DECLINES_PREVIOUS_OWNER,
            email_params={"innovation_name": innovation.name, "innovator_name": target_name},
            in_app_context=_context(T.TO08_TRANSFER_OWNERSHIP_DECLINES_PREVIOUS_OWNER, transfer.id),
            in_app_params={"innovationName": innovation.name},
            preference_category=INNOVATION_MANAGEMENT,
            innovation_id=innovation.id,
            notification_id=self.new_notification_id(),
        )

    async def _canceled(self, innovation: InnovationInfo, transfer: TransferInfo, owner_name: str) -> None:
        email_params = {"innovation_name": innovation.name, "innovator_name": owner_name}
        target, _ = await self._target_recipient(transfer.email)
        if target is None:
            self.add_emails(
                EmailRecipient(email=transfer.email),
                T.TO09_TRANSFER_OWNERSHIP_CANCELED_NEW_OWNER,
                email_params,
                preference_category=INNOVATION_MANAGEMENT,
            )
            return

        self.notify(
            [target],
            T.TO09_TRANSFER_OWNERSHIP_CANCELED_NEW_OWNER,
            email_params=email_params,
            in_app_context=_context(T.TO09_TRANSFER_OWNERSHIP_CANCELED_NEW_OWNER, transfer.id),
            in_app_params={"innovationName": innovation.name, "innovationOwner": owner_name},
            preference_category=INNOVATION_MANAGEMENT,
            innovation_id=innovation.id,
            notification_id=self.new_notification_id(),
        )


class TransferReminderHandler(_TransferHandler[TransferReminderPayload]):
    """One week left to answer a pending ownership transfer."""

    kind = NotifierType.INNOVATION_TRANSFER_OWNERSHIP_REMINDER

    async def handle(self) -> None:
        innovation_id = self.payload.innovation_id
        innovation_name = self.payload.innovation_name
        target, target_identity_id = await self._target_recipient(self.payload.recipient_email)
        if target_identity_id is None:
            self.add_emails(
                EmailRecipient(email=self.payload.recipient_email),
                T.AU07_TRANSFER_ONE_WEEK_REMINDER_NEW_USER,
                {"innovation_name": innovation_name, "create_account_url": self.links.create_account_url()},
                preference_category=AUTOMATIC,
            )
            return
        if target is None:
            self.skip("Transfer target has no innovator role", identity_id=target_identity_id)
            return

        notification_id = self.new_notification_id()
        self.notify(
            [target],
            T.AU08_TRANSFER_ONE_WEEK_REMINDER_EXISTING_USER,
            email_params={
                "innovation_name": innovation_name,
                "dashboard_url": self.links.dashboard_url(ServiceRole.INNOVATOR, notification_id),
            },
            in_app_context=InAppContext(
                type=AUTOMATIC, detail=T.AU08_TRANSFER_ONE_WEEK_REMINDER_EXISTING_USER, id=innovation_id
            ),
            in_app_params={"innovationName": innovation_name},
            preference_category=AUTOMATIC,
            innovation_id=innovation_id,
            notification_id=notification_id,
        )


class TransferExpirationHandler(BaseHandler[TransferExpirationPayload]):
    """A pending transfer expired unanswered; the owner keeps the innovation."""

    kind = NotifierType.INNOVATION_TRANSFER_OWNERSHIP_EXPIRATION

    async def handle(self) -> None:
        innovation = await self.recipients.innovation_info(self.payload.innovation_id)
        owner = await self.resolve_owner(innovation)
        if owner is None:
            self.skip("Innovation has no owner to tell about the expired transfer", innovation_id=innovation.id)
            return

        notification_id = self.new_notification_id()
        self.notify(
            [owner],
            T.AU09_TRANSFER_EXPIRED,
            email_params={
                "innovation_name": innovation.name,
                "manage_innovation_url": self.links.manage_innovation_url(innovation.id, notification_id),
            },
            in_app_context=InAppContext(type=AUTOMATIC, detail=T.AU09_TRANSFER_EXPIRED, id=innovation.id),
            in_app_params={"innovationName": innovation.name},
            preference_category=AUTOMATIC,
            innovation_id=innovation.id,
            notification_id=notification_id,
        )
