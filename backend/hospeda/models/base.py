"""
Hospeda Backend — Shared ORM Column Mixins
===========================================

What:  Column groups every entity table is assembled from.
Why:   Each entity carries the same audit and soft-delete columns; content
       entities add lifecycle, visibility and moderation state.
How:   Plain mixin classes with `mapped_column` attributes. SQLAlchemy copies
       them onto each concrete model that inherits from `Base`.

Column Types:
    Generic types only (`Uuid`, `DateTime(timezone=True)`, `String`, `JSON`)
    so the same models run on PostgreSQL (asyncpg) in production and on
    SQLite (aiosqlite) in the test suite.

    State columns are stored as short strings rather than native enums: a
    row with an unexpected visibility value must still load, so the
    permission evaluator can reject it explicitly.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hospeda.enums import LifecycleStatusEnum, ModerationStatusEnum, VisibilityEnum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditMixin:
    """Primary key, audit trail and soft-delete tombstone."""

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    updated_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    # Non-null deleted_at hides the row from every default repository query
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    deleted_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)


class LifecycleMixin:
    lifecycle_state: Mapped[str] = mapped_column(
        String(20), nullable=False, default=LifecycleStatusEnum.ACTIVE.value
    )


class VisibilityMixin:
    visibility: Mapped[str] = mapped_column(
        String(20), nullable=False, default=VisibilityEnum.PUBLIC.value
    )


class ModerationMixin:
    moderation_state: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ModerationStatusEnum.PENDING.value
    )


# Columns only the service layer may write
SERVER_MANAGED_FIELDS = frozenset({
    "id",
    "created_at",
    "updated_at",
    "created_by_id",
    "updated_by_id",
    "deleted_at",
    "deleted_by_id",
})
