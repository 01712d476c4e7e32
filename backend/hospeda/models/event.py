"""
Hospeda Backend — Event Model
==============================

What:  ORM model for `events`: dated happenings at a destination.
Owner: `author_id`.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Date, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hospeda.database import Base
from hospeda.models.base import AuditMixin, LifecycleMixin, ModerationMixin, VisibilityMixin


class Event(AuditMixin, LifecycleMixin, VisibilityMixin, ModerationMixin, Base):
    __tablename__ = "events"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    summary: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(30), nullable=False)

    author_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    destination_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("destinations.id"), nullable=True
    )

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    price_from: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    price_to: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, slug='{self.slug}', start_date={self.start_date})>"
