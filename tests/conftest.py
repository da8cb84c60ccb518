"""Pytest configuration and shared fixtures.

Organization:
    - Database Fixtures: in-memory SQLite engine, session factory and a seeder
    - Notification Fixtures: link builder, actor contexts and mocked collaborators

When adding new fixtures:
    1. Add them to the appropriate section below
    2. Keep them composable (fixtures can depend on other fixtures)
"""

from __future__ import annotations

import itertools
import os
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from innovation_service.core.database import Base
from innovation_service.features.notifications.enums import ServiceRole
from innovation_service.features.notifications.identity import IdentityUserInfo
from innovation_service.features.notifications.links import DeepLinkBuilder
from innovation_service.features.notifications.models import (
    Innovation,
    InnovationCollaborator,
    InnovationShare,
    InnovationSupport,
    InnovationSupportAssignment,
    InnovationSupportLog,
    InnovationSupportLogOrganisationUnit,
    InnovationThread,
    InnovationThreadMessage,
    NotificationPreference,
    Organisation,
    OrganisationUnit,
    User,
    UserRole,
)
from innovation_service.features.notifications.recipients import RecipientsService
from innovation_service.features.notifications.schemas import DomainContext
from innovation_service.features.notifications.types import Recipient

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

# Ensure tests never reach external infrastructure
os.environ.setdefault("DB_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("IDENTITY_BASE_URL", "http://identity.test")
os.environ.setdefault("NOTIFICATIONS_WEB_BASE_TRANSACTIONAL_URL", "https://innovation.test")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")

BASE_URL = "https://innovation.test"


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Async engine on one shared in-memory SQLite connection, tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def recipients_service(session_factory: async_sessionmaker[AsyncSession]) -> RecipientsService:
    return RecipientsService(session_factory)


class Seeder:
    """Creates platform rows for recipient tests and commits after each call.

    Example:
        user = await seed.user("identity-1")
        role = await seed.role(user, ServiceRole.INNOVATOR)
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _add(self, *rows: Any) -> None:
        self.session.add_all(rows)
        await self.session.commit()

    async def user(self, identity_id: str, *, locked: bool = False, deleted: bool = False) -> User:
        now = datetime.now(UTC)
        user = User(
            identity_id=identity_id,
            locked_at=now if locked else None,
            deleted_at=now if deleted else None,
        )
        await self._add(user)
        return user

    async def organisation(self, name: str, *, inactive: bool = False) -> Organisation:
        organisation = Organisation(name=name, inactivated_at=datetime.now(UTC) if inactive else None)
        await self._add(organisation)
        return organisation

    async def unit(self, organisation: Organisation, name: str, *, inactive: bool = False) -> OrganisationUnit:
        unit = OrganisationUnit(
            organisation_id=organisation.id,
            name=name,
            inactivated_at=datetime.now(UTC) if inactive else None,
        )
        await self._add(unit)
        return unit

    async def role(
        self,
        user: User,
        role: ServiceRole,
        *,
        unit: OrganisationUnit | None = None,
        active: bool = True,
        created_at: datetime | None = None,
    ) -> UserRole:
        user_role = UserRole(
            user_id=user.id,
            role=role,
            organisation_id=unit.organisation_id if unit else None,
            organisation_unit_id=unit.id if unit else None,
            is_active=active,
        )
        if created_at is not None:
            user_role.created_at = created_at
        await self._add(user_role)
        return user_role

    async def innovation(self, name: str, owner: User | None, **kwargs: Any) -> Innovation:
        innovation = Innovation(name=name, owner_id=owner.id if owner else None, **kwargs)
        await self._add(innovation)
        return innovation

    async def collaborator(
        self,
        innovation: Innovation,
        email: str,
        *,
        user: User | None = None,
        status: str = "ACTIVE",
    ) -> InnovationCollaborator:
        collaborator = InnovationCollaborator(
            innovation_id=innovation.id,
            user_id=user.id if user else None,
            email=email,
            status=status,
        )
        await self._add(collaborator)
        return collaborator

    async def share(self, innovation: Innovation, organisation: Organisation) -> None:
        await self._add(InnovationShare(innovation_id=innovation.id, organisation_id=organisation.id))

    async def support(
        self,
        innovation: Innovation,
        unit: OrganisationUnit,
        status: str,
        *,
        assigned: list[UserRole] | None = None,
        updated_at: datetime | None = None,
    ) -> InnovationSupport:
        support = InnovationSupport(innovation_id=innovation.id, organisation_unit_id=unit.id, status=status)
        if updated_at is not None:
            support.created_at = updated_at
            support.updated_at = updated_at
        await self._add(support)
        if assigned:
            await self._add(
                *(InnovationSupportAssignment(support_id=support.id, user_role_id=role.id) for role in assigned)
            )
        return support

    async def suggestion(
        self,
        innovation: Innovation,
        units: list[OrganisationUnit],
        *,
        log_type: str = "ACCESSOR_SUGGESTION",
        created_at: datetime | None = None,
    ) -> InnovationSupportLog:
        log = InnovationSupportLog(innovation_id=innovation.id, type=log_type)
        if created_at is not None:
            log.created_at = created_at
        await self._add(log)
        await self._add(
            *(
                InnovationSupportLogOrganisationUnit(innovation_support_log_id=log.id, organisation_unit_id=unit.id)
                for unit in units
            )
        )
        return log

    async def thread(self, innovation: Innovation, author: UserRole, subject: str = "Subject") -> InnovationThread:
        thread = InnovationThread(
            innovation_id=innovation.id,
            subject=subject,
            author_id=author.user_id,
            author_user_role_id=author.id,
        )
        await self._add(thread)
        return thread

    async def message(
        self,
        thread: InnovationThread,
        author: UserRole,
        *,
        created_at: datetime | None = None,
        deleted: bool = False,
    ) -> InnovationThreadMessage:
        message = InnovationThreadMessage(
            thread_id=thread.id,
            author_id=author.user_id,
            author_user_role_id=author.id,
            author_organisation_unit_id=author.organisation_unit_id,
            message="Hello",
            deleted_at=datetime.now(UTC) if deleted else None,
        )
        if created_at is not None:
            message.created_at = created_at
        await self._add(message)
        return message

    async def preference(self, role: UserRole, category: str, value: str) -> None:
        await self._add(NotificationPreference(user_role_id=role.id, notification_type=category, preference=value))


@pytest.fixture
def seed(db_session: AsyncSession) -> Seeder:
    return Seeder(db_session)


# ============================================================================
# Notification Fixtures
# ============================================================================


@pytest.fixture
def links() -> DeepLinkBuilder:
    return DeepLinkBuilder(BASE_URL)


@pytest.fixture
def make_context() -> Callable[..., DomainContext]:
    """Factory for the acting user's context.

    Example:
        context = make_context(ServiceRole.ACCESSOR, unit_name="Health Unit")
    """

    def _make(
        role: ServiceRole = ServiceRole.INNOVATOR,
        *,
        user_id: str = "actor-user",
        identity_id: str = "actor-identity",
        role_id: str = "actor-role",
        unit_id: str | None = None,
        unit_name: str | None = None,
    ) -> DomainContext:
        data: dict[str, Any] = {
            "id": user_id,
            "identity_id": identity_id,
            "current_role": {"id": role_id, "role": role},
        }
        if unit_id or unit_name:
            data["organisation"] = {
                "id": "actor-organisation",
                "name": "Actor Organisation",
                "organisation_unit": {"id": unit_id or "actor-unit", "name": unit_name or "Actor Unit"},
            }
        return DomainContext.model_validate(data)

    return _make


@pytest.fixture
def make_recipient() -> Callable[..., Recipient]:
    """Factory for recipients with unique ids unless given explicitly."""
    counter = itertools.count(1)

    def _make(
        role: ServiceRole = ServiceRole.INNOVATOR,
        *,
        user_id: str | None = None,
        role_id: str | None = None,
        identity_id: str | None = None,
        is_active: bool = True,
        unit_id: str | None = None,
    ) -> Recipient:
        n = next(counter)
        return Recipient(
            user_id=user_id or f"user-{n}",
            role_id=role_id or f"role-{n}",
            role=role,
            identity_id=identity_id or f"identity-{n}",
            is_active=is_active,
            organisation_unit_id=unit_id,
        )

    return _make


@pytest.fixture
def recipients_mock() -> AsyncMock:
    return AsyncMock(spec=RecipientsService)


@pytest.fixture
def identity_mock() -> AsyncMock:
    """Identity provider whose users are named after their identity id."""
    identity = AsyncMock()

    async def _user_info(identity_id: str) -> IdentityUserInfo:
        return IdentityUserInfo(identity_id=identity_id, display_name=f"Name of {identity_id}")

    async def _users_info(identity_ids: list[str]) -> dict[str, IdentityUserInfo]:
        return {i: await _user_info(i) for i in identity_ids}

    identity.get_user_info.side_effect = _user_info
    identity.get_users_info.side_effect = _users_info
    identity.get_user_info_by_email.return_value = None
    return identity


@pytest.fixture
def handler_deps(recipients_mock: AsyncMock, links: DeepLinkBuilder, identity_mock: AsyncMock) -> dict[str, Any]:
    """Keyword arguments shared by every handler under test, with sequential notification ids."""
    ids = itertools.count(1)
    return {
        "recipients": recipients_mock,
        "links": links,
        "identity": identity_mock,
        "notification_id_factory": lambda: f"notification-{next(ids)}",
    }
