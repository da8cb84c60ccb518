"""Recipient resolution.

Read-only queries that turn domain identifiers (users, innovations, units,
threads, supports) into notification ``Recipient`` records. Every call opens
its own session from the injected factory, so one service instance can be
shared by concurrent handlers.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, overload

from sqlalchemy import func, select
from sqlalchemy.orm import aliased

from innovation_service.core.database import as_utc
from innovation_service.core.exceptions import NotFoundError
from innovation_service.features.notifications.enums import (
    InnovationCollaboratorStatus,
    InnovationStatus,
    InnovationSupportLogType,
    InnovationSupportStatus,
    NotificationCategory,
    NotificationPreferenceValue,
    ServiceRole,
)
from innovation_service.features.notifications.models import (
    Innovation,
    InnovationCollaborator,
    InnovationExportRequest,
    InnovationShare,
    InnovationSupport,
    InnovationSupportAssignment,
    InnovationSupportLog,
    InnovationSupportLogOrganisationUnit,
    InnovationTask,
    InnovationThread,
    InnovationThreadMessage,
    InnovationTransfer,
    NotificationPreference,
    Organisation,
    OrganisationUnit,
    User,
    UserRole,
)
from innovation_service.features.notifications.types import (
    CollaborationInfo,
    ExportRequestInfo,
    IdleSupport,
    IncompleteInnovation,
    InnovationInfo,
    OrganisationInfo,
    OrganisationUnitInfo,
    OwnedInnovation,
    Recipient,
    SuggestedUnit,
    SupportInfo,
    TaskInfo,
    ThreadInfo,
    TransferInfo,
    UnsupportedInnovation,
)
from innovation_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


def should_fire(days: int, threshold: int, repeat: int = 0) -> bool:
    """Whether a recurrent reminder is due after ``days`` idle days.

    With ``repeat`` 0 the reminder fires once, on the day the threshold is
    reached; otherwise it fires on the threshold and every ``repeat`` days after.

    Examples:
        >>> should_fire(30, 30)
        True
        >>> should_fire(31, 30)
        False
        >>> should_fire(40, 30, repeat=10)
        True
    """
    if repeat > 0:
        return days >= threshold and (days - threshold) % repeat == 0
    return days == threshold


def _whole_days(now: datetime, since: datetime) -> int:
    return (now - as_utc(since)).days


def _is_active(user: User, role: UserRole) -> bool:
    return user.locked_at is None and role.is_active


def _to_recipient(role: UserRole, user: User) -> Recipient:
    return Recipient(
        user_id=user.id,
        role_id=role.id,
        role=ServiceRole(role.role),
        identity_id=user.identity_id,
        is_active=_is_active(user, role),
        organisation_unit_id=role.organisation_unit_id,
    )


def _as_list(value: str | Iterable[str]) -> list[str]:
    return [value] if isinstance(value, str) else list(value)


class RecipientsService:
    """Queries the platform database for notification recipients and context.

    Example:
        service = RecipientsService(get_session_factory())
        owner = await service.resolve_by_role(owner_id, ServiceRole.INNOVATOR)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._lazy = get_lazy_logger(__name__)

    # ========================================================================
    # Users and roles
    # ========================================================================

    @overload
    async def resolve_by_role(
        self,
        user_ids: str,
        roles: ServiceRole | Sequence[ServiceRole],
        *,
        organisation: str | None = None,
        organisation_unit: str | None = None,
        with_deleted: bool = False,
    ) -> Recipient | None: ...

    @overload
    async def resolve_by_role(
        self,
        user_ids: Sequence[str],
        roles: ServiceRole | Sequence[ServiceRole],
        *,
        organisation: str | None = None,
        organisation_unit: str | None = None,
        with_deleted: bool = False,
    ) -> list[Recipient]: ...

    async def resolve_by_role(
        self,
        user_ids: str | Sequence[str],
        roles: ServiceRole | Sequence[ServiceRole],
        *,
        organisation: str | None = None,
        organisation_unit: str | None = None,
        with_deleted: bool = False,
    ) -> Recipient | None | list[Recipient]:
        """Resolve users to recipients under the given roles.

        Locked users and roles are included and flagged with
        ``is_active=False``; the caller decides whether to notify them.

        Args:
            user_ids: One user id, or several.
            roles: Roles to match (a user may hold several).
            organisation: Restrict to roles of this organisation.
            organisation_unit: Restrict to roles of this organisation unit.
            with_deleted: Include soft-deleted users and roles.

        Returns:
            For a single id, its first matching recipient or ``None``.
            For a sequence, recipients in input-id order.
        """
        single = isinstance(user_ids, str)
        ids = _as_list(user_ids)
        if not ids:
            return []
        role_values = [roles] if isinstance(roles, ServiceRole) else list(roles)

        stmt = (
            select(UserRole, User)
            .join(User, User.id == UserRole.user_id)
            .where(UserRole.user_id.in_(ids), UserRole.role.in_(role_values))
            .order_by(UserRole.created_at, UserRole.id)
        )
        if organisation:
            stmt = stmt.where(UserRole.organisation_id == organisation)
        if organisation_unit:
            stmt = stmt.where(UserRole.organisation_unit_id == organisation_unit)
        if not with_deleted:
            stmt = stmt.where(User.deleted_at.is_(None), UserRole.deleted_at.is_(None))

        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()

        position = {user_id: index for index, user_id in enumerate(ids)}
        recipients = sorted(
            (_to_recipient(role, user) for role, user in rows),
            key=lambda r: position[r.user_id],
        )
        self._lazy.debug(lambda: f"db.resolve_by_role({len(ids)} users, {role_values}) -> {len(recipients)} recipients")

        if single:
            return recipients[0] if recipients else None
        return recipients

    async def resolve_by_role_ids(self, role_ids: Sequence[str]) -> list[Recipient]:
        """Recipients for explicit role ids, in input order; unknown or deleted ids are skipped."""
        if not role_ids:
            return []
        stmt = (
            select(UserRole, User)
            .join(User, User.id == UserRole.user_id)
            .where(
                UserRole.id.in_(role_ids),
                UserRole.deleted_at.is_(None),
                User.deleted_at.is_(None),
            )
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()

        by_id = {role.id: _to_recipient(role, user) for role, user in rows}
        return [by_id[role_id] for role_id in dict.fromkeys(role_ids) if role_id in by_id]

    async def needs_assessment_users(self, include_locked: bool = False) -> list[Recipient]:
        stmt = (
            select(UserRole, User)
            .join(User, User.id == UserRole.user_id)
            .where(
                UserRole.role == ServiceRole.ASSESSMENT,
                UserRole.deleted_at.is_(None),
                User.deleted_at.is_(None),
            )
            .order_by(UserRole.created_at, UserRole.id)
        )
        if not include_locked:
            stmt = stmt.where(UserRole.is_active.is_(True), User.locked_at.is_(None))
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()
        return [_to_recipient(role, user) for role, user in rows]

    async def users_with_roles(self, roles: Sequence[ServiceRole]) -> list[Recipient]:
        """One active recipient per user holding any of ``roles``, the user's oldest matching role first."""
        if not roles:
            return []
        stmt = (
            select(UserRole, User)
            .join(User, User.id == UserRole.user_id)
            .where(
                UserRole.role.in_(list(roles)),
                UserRole.is_active.is_(True),
                UserRole.deleted_at.is_(None),
                User.deleted_at.is_(None),
                User.locked_at.is_(None),
            )
            .order_by(UserRole.created_at, UserRole.id)
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()

        by_user: dict[str, Recipient] = {}
        for role, user in rows:
            by_user.setdefault(user.id, _to_recipient(role, user))
        return list(by_user.values())

    async def identity_id_to_user_id(self, identity_id: str) -> str | None:
        """Platform user id for an identity id, deleted users included."""
        async with self._session_factory() as session:
            return await session.scalar(select(User.id).where(User.identity_id == identity_id))

    async def user_id_to_identity_id(self, user_id: str) -> str | None:
        """Identity id for a platform user id, deleted users included."""
        async with self._session_factory() as session:
            return await session.scalar(select(User.identity_id).where(User.id == user_id))

    async def get_email_preferences(
        self,
        role_ids: Sequence[str],
    ) -> dict[str, dict[NotificationCategory, NotificationPreferenceValue]]:
        """Stored email preferences per role; roles without any stored preference are absent."""
        if not role_ids:
            return {}
        stmt = select(NotificationPreference).where(NotificationPreference.user_role_id.in_(role_ids))
        async with self._session_factory() as session:
            preferences = (await session.scalars(stmt)).all()

        result: dict[str, dict[NotificationCategory, NotificationPreferenceValue]] = {}
        for preference in preferences:
            result.setdefault(preference.user_role_id, {})[NotificationCategory(preference.notification_type)] = (
                NotificationPreferenceValue(preference.preference)
            )
        return result

    # ========================================================================
    # Innovations
    # ========================================================================

    async def innovation_info(self, innovation_id: str, with_deleted: bool = False) -> InnovationInfo:
        """Innovation name, status and owner.

        Raises:
            NotFoundError: If the innovation does not exist.
        """
        stmt = (
            select(Innovation, User.identity_id)
            .outerjoin(User, User.id == Innovation.owner_id)
            .where(Innovation.id == innovation_id)
        )
        if not with_deleted:
            stmt = stmt.where(Innovation.deleted_at.is_(None))
        async with self._session_factory() as session:
            row = (await session.execute(stmt)).first()

        if row is None:
            raise NotFoundError(
                detail="Innovation not found",
                type="innovation-not-found",
                extra={"innovation_id": innovation_id},
            )
        innovation, owner_identity_id = row
        return InnovationInfo(
            id=innovation.id,
            name=innovation.name,
            status=InnovationStatus(innovation.status),
            owner_id=innovation.owner_id,
            owner_identity_id=owner_identity_id,
        )

    async def resolve_owner_and_collaborators(self, innovation_id: str, *, only_active: bool = True) -> list[str]:
        """User ids of the owner and collaborators of an innovation.

        The owner comes first, when present and not deleted. Collaborators
        need a linked platform user; with ``only_active`` only ACTIVE ones
        are returned, otherwise PENDING ones are added too.
        """
        statuses = [InnovationCollaboratorStatus.ACTIVE]
        if not only_active:
            statuses.append(InnovationCollaboratorStatus.PENDING)

        owner_stmt = (
            select(User.id)
            .join(Innovation, Innovation.owner_id == User.id)
            .where(Innovation.id == innovation_id, User.deleted_at.is_(None))
        )
        collaborators_stmt = (
            select(InnovationCollaborator.user_id)
            .join(User, User.id == InnovationCollaborator.user_id)
            .where(
                InnovationCollaborator.innovation_id == innovation_id,
                InnovationCollaborator.status.in_(statuses),
                InnovationCollaborator.deleted_at.is_(None),
                User.deleted_at.is_(None),
            )
            .order_by(InnovationCollaborator.created_at, InnovationCollaborator.id)
        )
        async with self._session_factory() as session:
            owner_id = await session.scalar(owner_stmt)
            collaborator_ids = (await session.scalars(collaborators_stmt)).all()

        user_ids = ([owner_id] if owner_id else []) + [c for c in collaborator_ids if c]
        return list(dict.fromkeys(user_ids))

    async def innovation_shared_units(self, innovation_id: str) -> list[OrganisationUnitInfo]:
        """Active units of the active organisations an innovation is shared with."""
        stmt = (
            select(Organisation, OrganisationUnit)
            .join(InnovationShare, InnovationShare.organisation_id == Organisation.id)
            .join(OrganisationUnit, OrganisationUnit.organisation_id == Organisation.id)
            .where(
                InnovationShare.innovation_id == innovation_id,
                Organisation.inactivated_at.is_(None),
                Organisation.deleted_at.is_(None),
                OrganisationUnit.inactivated_at.is_(None),
                OrganisationUnit.deleted_at.is_(None),
            )
            .order_by(Organisation.name, OrganisationUnit.name)
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()
        return [self._unit_info(organisation, unit) for organisation, unit in rows]

    async def user_innovations_with_assigned_recipients(self, user_id: str) -> list[OwnedInnovation]:
        """Innovations owned by a user, each with the users assigned to its supports."""
        stmt = (
            select(Innovation.id, Innovation.name)
            .where(Innovation.owner_id == user_id, Innovation.deleted_at.is_(None))
            .order_by(Innovation.created_at, Innovation.id)
        )
        async with self._session_factory() as session:
            innovations = (await session.execute(stmt)).all()
            assigned = await self._assigned_rows(session, [i.id for i in innovations])

        return [
            OwnedInnovation(
                id=innovation.id,
                name=innovation.name,
                assigned=[recipient for innovation_id, recipient in assigned if innovation_id == innovation.id],
            )
            for innovation in innovations
        ]

    async def user_collaborations(self, user_id: str) -> list[str]:
        """Names of innovations where the user is a pending or active collaborator."""
        stmt = (
            select(Innovation.name)
            .join(InnovationCollaborator, InnovationCollaborator.innovation_id == Innovation.id)
            .where(
                InnovationCollaborator.user_id == user_id,
                InnovationCollaborator.status.in_(
                    [InnovationCollaboratorStatus.PENDING, InnovationCollaboratorStatus.ACTIVE]
                ),
                InnovationCollaborator.deleted_at.is_(None),
                Innovation.deleted_at.is_(None),
            )
            .order_by(InnovationCollaborator.created_at)
        )
        async with self._session_factory() as session:
            return list((await session.scalars(stmt)).all())

    async def collaboration_info(self, collaborator_id: str) -> CollaborationInfo:
        """Raises NotFoundError if the collaboration does not exist."""
        async with self._session_factory() as session:
            collaborator = await session.get(InnovationCollaborator, collaborator_id)
        if collaborator is None:
            raise NotFoundError(
                detail="Innovation collaborator not found",
                type="innovation-collaborator-not-found",
                extra={"collaborator_id": collaborator_id},
            )
        return CollaborationInfo(
            collaborator_id=collaborator.id,
            email=collaborator.email,
            status=collaborator.status,
            user_id=collaborator.user_id,
        )

    async def transfer_info(self, transfer_id: str) -> TransferInfo:
        """Raises NotFoundError if the transfer does not exist."""
        async with self._session_factory() as session:
            transfer = await session.get(InnovationTransfer, transfer_id)
        if transfer is None:
            raise NotFoundError(
                detail="Innovation transfer not found",
                type="innovation-transfer-not-found",
                extra={"transfer_id": transfer_id},
            )
        return TransferInfo(
            id=transfer.id,
            email=transfer.email,
            status=transfer.status,
            owner_id=transfer.created_by,
        )

    async def export_request_info(self, request_id: str) -> ExportRequestInfo:
        """Raises NotFoundError if the export request does not exist."""
        stmt = (
            select(InnovationExportRequest, OrganisationUnit.name)
            .outerjoin(OrganisationUnit, OrganisationUnit.id == InnovationExportRequest.organisation_unit_id)
            .where(InnovationExportRequest.id == request_id)
        )
        async with self._session_factory() as session:
            row = (await session.execute(stmt)).first()
        if row is None:
            raise NotFoundError(
                detail="Innovation export request not found",
                type="innovation-export-request-not-found",
                extra={"request_id": request_id},
            )
        request, unit_name = row
        return ExportRequestInfo(
            id=request.id,
            status=request.status,
            request_reason=request.request_reason,
            reject_reason=request.reject_reason,
            created_by=request.created_by,
            created_by_role_id=request.created_by_user_role_id,
            unit_id=request.organisation_unit_id,
            unit_name=unit_name,
        )

    # ========================================================================
    # Organisation units
    # ========================================================================

    @staticmethod
    def _unit_info(organisation: Organisation, unit: OrganisationUnit) -> OrganisationUnitInfo:
        return OrganisationUnitInfo(
            organisation_id=organisation.id,
            organisation_name=organisation.name,
            organisation_acronym=organisation.acronym,
            unit_id=unit.id,
            unit_name=unit.name,
            unit_acronym=unit.acronym,
        )

    async def organisation_info(self, organisation_id: str) -> OrganisationInfo:
        """Raises NotFoundError if the organisation does not exist."""
        async with self._session_factory() as session:
            organisation = await session.get(Organisation, organisation_id)
        if organisation is None:
            raise NotFoundError(
                detail="Organisation not found",
                type="organisation-not-found",
                extra={"organisation_id": organisation_id},
            )
        return OrganisationInfo(id=organisation.id, name=organisation.name, acronym=organisation.acronym)

    async def organisation_unit_info(self, unit_id: str) -> OrganisationUnitInfo:
        """Unit and its organisation, inactivated units included.

        Raises:
            NotFoundError: If the unit does not exist.
        """
        stmt = (
            select(Organisation, OrganisationUnit)
            .join(OrganisationUnit, OrganisationUnit.organisation_id == Organisation.id)
            .where(OrganisationUnit.id == unit_id)
        )
        async with self._session_factory() as session:
            row = (await session.execute(stmt)).first()
        if row is None:
            raise NotFoundError(
                detail="Organisation unit not found",
                type="organisation-unit-not-found",
                extra={"unit_id": unit_id},
            )
        return self._unit_info(*row)

    async def resolve_unit_qualifying_accessors(
        self,
        unit_ids: Sequence[str],
        include_locked: bool = False,
    ) -> list[Recipient]:
        """Qualifying accessors of active units that belong to active organisations."""
        if not unit_ids:
            return []
        stmt = (
            select(UserRole, User)
            .join(User, User.id == UserRole.user_id)
            .join(OrganisationUnit, OrganisationUnit.id == UserRole.organisation_unit_id)
            .join(Organisation, Organisation.id == OrganisationUnit.organisation_id)
            .where(
                UserRole.organisation_unit_id.in_(unit_ids),
                UserRole.role == ServiceRole.QUALIFYING_ACCESSOR,
                UserRole.deleted_at.is_(None),
                User.deleted_at.is_(None),
                OrganisationUnit.inactivated_at.is_(None),
                OrganisationUnit.deleted_at.is_(None),
                Organisation.inactivated_at.is_(None),
                Organisation.deleted_at.is_(None),
            )
            .order_by(UserRole.created_at, UserRole.id)
        )
        if not include_locked:
            stmt = stmt.where(UserRole.is_active.is_(True), User.locked_at.is_(None))
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()

        position = {unit_id: index for index, unit_id in enumerate(unit_ids)}
        recipients = [_to_recipient(role, user) for role, user in rows]
        return sorted(recipients, key=lambda r: position.get(r.organisation_unit_id or "", len(position)))

    async def unit_supports_in_status(
        self,
        unit_id: str,
        statuses: Sequence[InnovationSupportStatus],
    ) -> list[SupportInfo]:
        stmt = (
            select(InnovationSupport, Innovation.name)
            .join(Innovation, Innovation.id == InnovationSupport.innovation_id)
            .where(
                InnovationSupport.organisation_unit_id == unit_id,
                InnovationSupport.status.in_(list(statuses)),
                InnovationSupport.deleted_at.is_(None),
                Innovation.deleted_at.is_(None),
            )
            .order_by(Innovation.name)
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()
        return [
            SupportInfo(
                id=support.id,
                innovation_id=support.innovation_id,
                innovation_name=innovation_name,
                organisation_unit_id=support.organisation_unit_id,
                status=InnovationSupportStatus(support.status),
            )
            for support, innovation_name in rows
        ]

    # ========================================================================
    # Supports
    # ========================================================================

    async def _assigned_rows(
        self,
        session: AsyncSession,
        innovation_ids: Sequence[str],
        *,
        support_id: str | None = None,
        unit_id: str | None = None,
        support_statuses: Sequence[InnovationSupportStatus] | None = None,
    ) -> list[tuple[str, Recipient]]:
        if not innovation_ids and support_id is None:
            return []
        stmt = (
            select(InnovationSupport.innovation_id, UserRole, User)
            .join(InnovationSupportAssignment, InnovationSupportAssignment.support_id == InnovationSupport.id)
            .join(UserRole, UserRole.id == InnovationSupportAssignment.user_role_id)
            .join(User, User.id == UserRole.user_id)
            .where(
                UserRole.organisation_unit_id == InnovationSupport.organisation_unit_id,
                InnovationSupport.deleted_at.is_(None),
                UserRole.deleted_at.is_(None),
                User.deleted_at.is_(None),
                User.locked_at.is_(None),
            )
            .order_by(InnovationSupport.created_at, UserRole.created_at, UserRole.id)
        )
        if innovation_ids:
            stmt = stmt.where(InnovationSupport.innovation_id.in_(innovation_ids))
        if support_id is not None:
            stmt = stmt.where(InnovationSupport.id == support_id)
        if unit_id is not None:
            stmt = stmt.where(InnovationSupport.organisation_unit_id == unit_id)
        if support_statuses:
            stmt = stmt.where(InnovationSupport.status.in_(list(support_statuses)))

        rows = (await session.execute(stmt)).all()
        seen: set[tuple[str, str]] = set()
        result: list[tuple[str, Recipient]] = []
        for innovation_id, role, user in rows:
            if (innovation_id, role.id) in seen:
                continue
            seen.add((innovation_id, role.id))
            result.append((innovation_id, _to_recipient(role, user)))
        return result

    async def resolve_assigned_recipients(
        self,
        innovation_id: str,
        *,
        unit_id: str | None = None,
        support_statuses: Sequence[InnovationSupportStatus] | None = None,
    ) -> list[Recipient]:
        """Users assigned to an innovation's supports, one recipient per role.

        Only roles belonging to the support's unit count, so an accessor
        working for two units is notified once per unit assignment.
        """
        async with self._session_factory() as session:
            rows = await self._assigned_rows(
                session,
                [innovation_id],
                unit_id=unit_id,
                support_statuses=support_statuses,
            )
        return [recipient for _, recipient in rows]

    async def support_assigned_recipients(self, support_id: str) -> list[Recipient]:
        """Users assigned to one support."""
        async with self._session_factory() as session:
            rows = await self._assigned_rows(session, [], support_id=support_id)
        return [recipient for _, recipient in rows]

    async def support_info(self, support_id: str) -> SupportInfo:
        """Raises NotFoundError if the support does not exist."""
        stmt = (
            select(InnovationSupport, Innovation.name)
            .join(Innovation, Innovation.id == InnovationSupport.innovation_id)
            .where(InnovationSupport.id == support_id)
        )
        async with self._session_factory() as session:
            row = (await session.execute(stmt)).first()
        if row is None:
            raise NotFoundError(
                detail="Innovation support not found",
                type="innovation-support-not-found",
                extra={"support_id": support_id},
            )
        support, innovation_name = row
        return SupportInfo(
            id=support.id,
            innovation_id=support.innovation_id,
            innovation_name=innovation_name,
            organisation_unit_id=support.organisation_unit_id,
            status=InnovationSupportStatus(support.status),
        )

    # ========================================================================
    # Threads and tasks
    # ========================================================================

    async def thread_info(self, thread_id: str) -> ThreadInfo:
        """Thread subject and author; the author is absent once deleted.

        Raises:
            NotFoundError: If the thread does not exist.
        """
        author_role = aliased(UserRole)
        author = aliased(User)
        stmt = (
            select(InnovationThread, author_role, author)
            .outerjoin(author_role, author_role.id == InnovationThread.author_user_role_id)
            .outerjoin(author, author.id == InnovationThread.author_id)
            .where(InnovationThread.id == thread_id)
        )
        async with self._session_factory() as session:
            row = (await session.execute(stmt)).first()
        if row is None:
            raise NotFoundError(
                detail="Innovation thread not found",
                type="innovation-thread-not-found",
                extra={"thread_id": thread_id},
            )
        thread, role, user = row
        has_author = role is not None and user is not None and user.deleted_at is None
        return ThreadInfo(
            id=thread.id,
            subject=thread.subject,
            author=_to_recipient(role, user) if has_author else None,
        )

    async def resolve_thread_followers(self, thread_id: str, include_locked: bool = False) -> list[Recipient]:
        """Distinct roles that wrote in a thread, the thread author included via the first message."""
        stmt = (
            select(UserRole, User)
            .select_from(InnovationThreadMessage)
            .join(UserRole, UserRole.id == InnovationThreadMessage.author_user_role_id)
            .join(User, User.id == InnovationThreadMessage.author_id)
            .where(
                InnovationThreadMessage.thread_id == thread_id,
                InnovationThreadMessage.deleted_at.is_(None),
                User.deleted_at.is_(None),
            )
            .order_by(InnovationThreadMessage.created_at, InnovationThreadMessage.id)
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()

        followers: dict[str, Recipient] = {}
        for role, user in rows:
            followers.setdefault(role.id, _to_recipient(role, user))
        result = [r for r in followers.values() if include_locked or r.is_active]
        self._lazy.debug(lambda: f"db.resolve_thread_followers({thread_id=}) -> {len(result)} followers")
        return result

    async def task_info(self, task_id: str) -> TaskInfo:
        """Task display id, status and creator; the creator is absent once deleted.

        Raises:
            NotFoundError: If the task does not exist.
        """
        stmt = (
            select(InnovationTask, UserRole, User)
            .outerjoin(UserRole, UserRole.id == InnovationTask.created_by_user_role_id)
            .outerjoin(User, (User.id == InnovationTask.created_by) & User.deleted_at.is_(None))
            .where(InnovationTask.id == task_id)
        )
        async with self._session_factory() as session:
            row = (await session.execute(stmt)).first()
        if row is None:
            raise NotFoundError(
                detail="Innovation task not found",
                type="innovation-task-not-found",
                extra={"task_id": task_id},
            )
        task, role, user = row
        return TaskInfo(
            id=task.id,
            display_id=task.display_id,
            status=task.status,
            owner=_to_recipient(role, user) if role is not None and user is not None else None,
        )

    # ========================================================================
    # Recurrent notifications
    # ========================================================================

    async def idle_supports(
        self,
        threshold_days: int,
        statuses: Sequence[InnovationSupportStatus],
        repeat_interval_days: int = 0,
        *,
        now: datetime | None = None,
    ) -> list[IdleSupport]:
        """Supports whose last activity is ``threshold_days`` old (see ``should_fire``).

        Activity is the latest of: the support's own update, an update to a
        task raised under it, a thread message written by a role of its unit
        on the innovation, and a support log entry of its unit.
        """
        now = now or datetime.now(UTC)
        support_stmt = (
            select(InnovationSupport, Innovation.name)
            .join(Innovation, Innovation.id == InnovationSupport.innovation_id)
            .where(
                InnovationSupport.status.in_(list(statuses)),
                InnovationSupport.deleted_at.is_(None),
                Innovation.deleted_at.is_(None),
                Innovation.status != InnovationStatus.ARCHIVED,
            )
            .order_by(InnovationSupport.created_at, InnovationSupport.id)
        )

        async with self._session_factory() as session:
            supports = (await session.execute(support_stmt)).all()
            if not supports:
                return []
            support_ids = [support.id for support, _ in supports]
            innovation_ids = list({support.innovation_id for support, _ in supports})

            task_rows = await session.execute(
                select(InnovationTask.support_id, func.max(InnovationTask.updated_at))
                .where(InnovationTask.support_id.in_(support_ids))
                .group_by(InnovationTask.support_id)
            )
            message_rows = await session.execute(
                select(
                    InnovationThread.innovation_id,
                    UserRole.organisation_unit_id,
                    func.max(InnovationThreadMessage.created_at),
                )
                .join(InnovationThread, InnovationThread.id == InnovationThreadMessage.thread_id)
                .join(UserRole, UserRole.id == InnovationThreadMessage.author_user_role_id)
                .where(
                    InnovationThread.innovation_id.in_(innovation_ids),
                    InnovationThreadMessage.deleted_at.is_(None),
                    UserRole.organisation_unit_id.is_not(None),
                )
                .group_by(InnovationThread.innovation_id, UserRole.organisation_unit_id)
            )
            log_rows = await session.execute(
                select(
                    InnovationSupportLog.innovation_id,
                    InnovationSupportLog.organisation_unit_id,
                    func.max(InnovationSupportLog.created_at),
                )
                .where(
                    InnovationSupportLog.innovation_id.in_(innovation_ids),
                    InnovationSupportLog.organisation_unit_id.is_not(None),
                )
                .group_by(InnovationSupportLog.innovation_id, InnovationSupportLog.organisation_unit_id)
            )
            last_task = {support_id: as_utc(at) for support_id, at in task_rows.all() if at}
            last_message = {(inn, unit): as_utc(at) for inn, unit, at in message_rows.all() if at}
            last_log = {(inn, unit): as_utc(at) for inn, unit, at in log_rows.all() if at}

        result: list[IdleSupport] = []
        for support, innovation_name in supports:
            key = (support.innovation_id, support.organisation_unit_id)
            candidates = [
                as_utc(support.updated_at),
                last_task.get(support.id),
                last_message.get(key),
                last_log.get(key),
            ]
            last_activity = max(c for c in candidates if c is not None)
            days = _whole_days(now, last_activity)
            if should_fire(days, threshold_days, repeat_interval_days):
                result.append(
                    IdleSupport(
                        support_id=support.id,
                        innovation_id=support.innovation_id,
                        innovation_name=innovation_name,
                        organisation_unit_id=support.organisation_unit_id,
                        status=InnovationSupportStatus(support.status),
                        last_activity_at=last_activity,
                        days_idle=days,
                    )
                )
        self._lazy.debug(
            lambda: f"db.idle_supports({threshold_days=}, {statuses=}, {repeat_interval_days=}) -> {len(result)}"
        )
        return result

    async def idle_waiting_supports(
        self,
        threshold_days: int,
        repeat_interval_days: int = 0,
        *,
        now: datetime | None = None,
    ) -> list[IdleSupport]:
        return await self.idle_supports(
            threshold_days,
            [InnovationSupportStatus.WAITING],
            repeat_interval_days,
            now=now,
        )

    async def incomplete_innovations(
        self,
        threshold_days: int,
        repeat_interval_days: int = 0,
        *,
        now: datetime | None = None,
    ) -> list[IncompleteInnovation]:
        """Unsubmitted (CREATED) innovations untouched for ``threshold_days``, with a live owner."""
        now = now or datetime.now(UTC)
        stmt = (
            select(Innovation)
            .join(User, User.id == Innovation.owner_id)
            .where(
                Innovation.status == InnovationStatus.CREATED,
                Innovation.deleted_at.is_(None),
                User.deleted_at.is_(None),
            )
            .order_by(Innovation.created_at, Innovation.id)
        )
        async with self._session_factory() as session:
            innovations = (await session.scalars(stmt)).all()

        result = []
        for innovation in innovations:
            days = _whole_days(now, innovation.updated_at)
            if innovation.owner_id and should_fire(days, threshold_days, repeat_interval_days):
                result.append(
                    IncompleteInnovation(
                        innovation_id=innovation.id,
                        innovation_name=innovation.name,
                        owner_id=innovation.owner_id,
                        days_idle=days,
                    )
                )
        return result

    async def innovations_without_support(
        self,
        threshold_days: int,
        repeat_interval_days: int = 0,
        archive_after_days: int = 180,
        *,
        now: datetime | None = None,
    ) -> list[UnsupportedInnovation]:
        """In-progress innovations with no engaging or waiting support for ``threshold_days``.

        The idle clock starts at the last update of any of the innovation's
        supports, or at the innovation's own update when it never had one.
        """
        now = now or datetime.now(UTC)
        stmt = (
            select(Innovation, InnovationSupport)
            .outerjoin(
                InnovationSupport,
                (InnovationSupport.innovation_id == Innovation.id) & InnovationSupport.deleted_at.is_(None),
            )
            .where(
                Innovation.status == InnovationStatus.IN_PROGRESS,
                Innovation.deleted_at.is_(None),
            )
            .order_by(Innovation.created_at, Innovation.id)
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()

        innovations: dict[str, Innovation] = {}
        supports: dict[str, list[InnovationSupport]] = {}
        for innovation, support in rows:
            innovations.setdefault(innovation.id, innovation)
            bucket = supports.setdefault(innovation.id, [])
            if support is not None:
                bucket.append(support)

        active = {InnovationSupportStatus.ENGAGING, InnovationSupportStatus.WAITING}
        result: list[UnsupportedInnovation] = []
        for innovation_id, innovation in innovations.items():
            own = supports[innovation_id]
            if any(support.status in active for support in own):
                continue
            last_support_at = max((as_utc(s.updated_at) for s in own), default=as_utc(innovation.updated_at))
            days = _whole_days(now, last_support_at)
            if should_fire(days, threshold_days, repeat_interval_days):
                result.append(
                    UnsupportedInnovation(
                        innovation_id=innovation_id,
                        innovation_name=innovation.name,
                        last_support_at=last_support_at,
                        days_idle=days,
                        expected_archive_date=last_support_at + timedelta(days=archive_after_days),
                    )
                )
        self._lazy.debug(lambda: f"db.innovations_without_support({threshold_days=}) -> {len(result)}")
        return result

    async def suggested_units_without_support(
        self,
        *,
        innovation_id: str | None = None,
        organisation_ids: Sequence[str] | None = None,
    ) -> list[SuggestedUnit]:
        """Units suggested for an in-progress innovation shared with them that opened no support.

        ``suggested_at`` is the first suggestion of the unit for the innovation.
        """
        stmt = (
            select(
                Innovation.id,
                Innovation.name,
                InnovationSupportLogOrganisationUnit.organisation_unit_id,
                func.min(InnovationSupportLog.created_at),
            )
            .select_from(InnovationSupportLogOrganisationUnit)
            .join(
                InnovationSupportLog,
                InnovationSupportLog.id == InnovationSupportLogOrganisationUnit.innovation_support_log_id,
            )
            .join(Innovation, Innovation.id == InnovationSupportLog.innovation_id)
            .join(OrganisationUnit, OrganisationUnit.id == InnovationSupportLogOrganisationUnit.organisation_unit_id)
            .join(Organisation, Organisation.id == OrganisationUnit.organisation_id)
            .join(
                InnovationShare,
                (InnovationShare.innovation_id == Innovation.id)
                & (InnovationShare.organisation_id == Organisation.id),
            )
            .outerjoin(
                InnovationSupport,
                (InnovationSupport.innovation_id == Innovation.id)
                & (InnovationSupport.organisation_unit_id == OrganisationUnit.id)
                & InnovationSupport.deleted_at.is_(None),
            )
            .where(
                InnovationSupportLog.type.in_(
                    [InnovationSupportLogType.ACCESSOR_SUGGESTION, InnovationSupportLogType.ASSESSMENT_SUGGESTION]
                ),
                Innovation.status == InnovationStatus.IN_PROGRESS,
                Innovation.deleted_at.is_(None),
                OrganisationUnit.inactivated_at.is_(None),
                OrganisationUnit.deleted_at.is_(None),
                Organisation.inactivated_at.is_(None),
                Organisation.deleted_at.is_(None),
                InnovationSupport.id.is_(None),
            )
            .group_by(Innovation.id, Innovation.name, InnovationSupportLogOrganisationUnit.organisation_unit_id)
            .order_by(func.min(InnovationSupportLog.created_at), Innovation.id)
        )
        if innovation_id is not None:
            stmt = stmt.where(Innovation.id == innovation_id)
        if organisation_ids is not None:
            stmt = stmt.where(Organisation.id.in_(list(organisation_ids)))
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()
        return [
            SuggestedUnit(
                innovation_id=inn_id,
                innovation_name=name,
                organisation_unit_id=unit_id,
                suggested_at=as_utc(suggested_at),
            )
            for inn_id, name, unit_id, suggested_at in rows
        ]

    async def unit_kpi_suggestions(
        self,
        threshold_days: int,
        *,
        now: datetime | None = None,
    ) -> dict[str, list[SuggestedUnit]]:
        """Suggestions without support that turn ``threshold_days`` old today, grouped by unit."""
        now = now or datetime.now(UTC)
        by_unit: dict[str, list[SuggestedUnit]] = {}
        for suggestion in await self.suggested_units_without_support():
            if should_fire(_whole_days(now, suggestion.suggested_at), threshold_days):
                by_unit.setdefault(suggestion.organisation_unit_id, []).append(suggestion)
        return by_unit
