"""Read-only SQLAlchemy models of the platform tables the notification engine queries.

Schema ownership lies with the platform's API services; these mappings
cover only the columns recipient resolution needs.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from innovation_service.core.database import Base, SoftDeleteMixin, TimestampMixin, UUIDPKMixin
from innovation_service.features.notifications.enums import (
    InnovationCollaboratorStatus,
    InnovationExportRequestStatus,
    InnovationStatus,
    InnovationSupportStatus,
    InnovationTaskStatus,
    InnovationTransferStatus,
    NotificationPreferenceValue,
)


class User(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    """Platform user. Display name and email live in the identity provider."""

    __tablename__ = "user"

    identity_id: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        comment="Identifier in the external identity provider",
    )
    locked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Set when an administrator locks the account",
    )


class Organisation(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "organisation"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    acronym: Mapped[str | None] = mapped_column(String(20), nullable=True)
    inactivated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class OrganisationUnit(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "organisation_unit"

    organisation_id: Mapped[str] = mapped_column(
        ForeignKey("organisation.id"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    acronym: Mapped[str | None] = mapped_column(String(20), nullable=True)
    inactivated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class UserRole(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    """One role assignment of a user, optionally scoped to an organisation unit."""

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(50), nullable=False, comment="ServiceRole value")
    organisation_id: Mapped[str | None] = mapped_column(
        ForeignKey("organisation.id"),
        nullable=True,
    )
    organisation_unit_id: Mapped[str | None] = mapped_column(
        ForeignKey("organisation_unit.id"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="False when the role is locked",
    )


class Innovation(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "innovation"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    owner_id: Mapped[str | None] = mapped_column(
        ForeignKey("user.id"),
        nullable=True,
        index=True,
        comment="Null once the owner deleted their account",
    )
    status: Mapped[str] = mapped_column(
        String(50),
        default=InnovationStatus.CREATED,
        nullable=False,
    )


class InnovationShare(Base):
    """Organisations an innovation is shared with."""

    __tablename__ = "innovation_share"

    innovation_id: Mapped[str] = mapped_column(ForeignKey("innovation.id"), primary_key=True)
    organisation_id: Mapped[str] = mapped_column(ForeignKey("organisation.id"), primary_key=True)


class InnovationCollaborator(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "innovation_collaborator"

    innovation_id: Mapped[str] = mapped_column(ForeignKey("innovation.id"), nullable=False, index=True)
    user_id: Mapped[str | None] = mapped_column(
        ForeignKey("user.id"),
        nullable=True,
        comment="Null until the invited email matches a platform user",
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=InnovationCollaboratorStatus.PENDING,
        nullable=False,
    )


class InnovationSupport(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "innovation_support"
    __table_args__ = (Index("ix_innovation_support_innovation_unit", "innovation_id", "organisation_unit_id"),)

    innovation_id: Mapped[str] = mapped_column(ForeignKey("innovation.id"), nullable=False)
    organisation_unit_id: Mapped[str] = mapped_column(ForeignKey("organisation_unit.id"), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=InnovationSupportStatus.SUGGESTED,
        nullable=False,
    )


class InnovationSupportAssignment(Base):
    """Accessor roles assigned to a support."""

    __tablename__ = "innovation_support_assignment"

    support_id: Mapped[str] = mapped_column(ForeignKey("innovation_support.id"), primary_key=True)
    user_role_id: Mapped[str] = mapped_column(ForeignKey("user_role.id"), primary_key=True)


class InnovationThread(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "innovation_thread"

    innovation_id: Mapped[str] = mapped_column(ForeignKey("innovation.id"), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    author_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False)
    author_user_role_id: Mapped[str] = mapped_column(ForeignKey("user_role.id"), nullable=False)


class InnovationThreadMessage(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "innovation_thread_message"

    thread_id: Mapped[str] = mapped_column(ForeignKey("innovation_thread.id"), nullable=False, index=True)
    author_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False)
    author_user_role_id: Mapped[str] = mapped_column(ForeignKey("user_role.id"), nullable=False)
    author_organisation_unit_id: Mapped[str | None] = mapped_column(
        ForeignKey("organisation_unit.id"),
        nullable=True,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")


class InnovationTask(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "innovation_task"

    innovation_id: Mapped[str] = mapped_column(ForeignKey("innovation.id"), nullable=False, index=True)
    support_id: Mapped[str | None] = mapped_column(
        ForeignKey("innovation_support.id"),
        nullable=True,
        index=True,
    )
    display_id: Mapped[str] = mapped_column(String(10), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=InnovationTaskStatus.OPEN, nullable=False)
    created_by: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False)
    created_by_user_role_id: Mapped[str] = mapped_column(ForeignKey("user_role.id"), nullable=False)


class InnovationSupportLog(Base, UUIDPKMixin, TimestampMixin):
    __tablename__ = "innovation_support_log"

    innovation_id: Mapped[str] = mapped_column(ForeignKey("innovation.id"), nullable=False, index=True)
    organisation_unit_id: Mapped[str | None] = mapped_column(
        ForeignKey("organisation_unit.id"),
        nullable=True,
        comment="Unit that wrote the entry",
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False, comment="InnovationSupportLogType value")


class InnovationSupportLogOrganisationUnit(Base):
    """Units suggested by a suggestion log entry."""

    __tablename__ = "innovation_support_log_organisation_unit"

    innovation_support_log_id: Mapped[str] = mapped_column(ForeignKey("innovation_support_log.id"), primary_key=True)
    organisation_unit_id: Mapped[str] = mapped_column(ForeignKey("organisation_unit.id"), primary_key=True)


class InnovationTransfer(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "innovation_transfer"

    innovation_id: Mapped[str] = mapped_column(ForeignKey("innovation.id"), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, comment="Invited new owner")
    status: Mapped[str] = mapped_column(
        String(20),
        default=InnovationTransferStatus.PENDING,
        nullable=False,
    )
    created_by: Mapped[str] = mapped_column(
        ForeignKey("user.id"),
        nullable=False,
        comment="Owner that started the transfer",
    )


class InnovationExportRequest(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "innovation_export_request"

    innovation_id: Mapped[str] = mapped_column(ForeignKey("innovation.id"), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20),
        default=InnovationExportRequestStatus.PENDING,
        nullable=False,
    )
    request_reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    reject_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False)
    created_by_user_role_id: Mapped[str] = mapped_column(ForeignKey("user_role.id"), nullable=False)
    organisation_unit_id: Mapped[str | None] = mapped_column(
        ForeignKey("organisation_unit.id"),
        nullable=True,
    )


class NotificationPreference(Base, TimestampMixin):
    """Explicit email preference of a role for one category; absence means YES."""

    __tablename__ = "notification_preference"

    user_role_id: Mapped[str] = mapped_column(ForeignKey("user_role.id"), primary_key=True)
    notification_type: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        comment="NotificationCategory value",
    )
    preference: Mapped[str] = mapped_column(
        String(3),
        default=NotificationPreferenceValue.YES,
        nullable=False,
    )
