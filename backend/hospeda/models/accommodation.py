"""
Hospeda Backend — Accommodation Model
======================================

What:  ORM model for `accommodations`: lodging listings owned by a host.
Owner: `owner_id`.
"""

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hospeda.database import Base
from hospeda.models.base import AuditMixin, LifecycleMixin, ModerationMixin, VisibilityMixin


class Accommodation(AuditMixin, LifecycleMixin, VisibilityMixin, ModerationMixin, Base):
    __tablename__ = "accommodations"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    summary: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False)

    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    destination_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("destinations.id"), nullable=False
    )

    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="ARS")
    max_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_accommodations_owner", "owner_id"),
        Index("idx_accommodations_destination", "destination_id"),
    )

    def __repr__(self) -> str:
        return f"<Accommodation(id={self.id}, slug='{self.slug}', owner_id={self.owner_id})>"
