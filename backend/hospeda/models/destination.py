"""
Hospeda Backend — Destination Model
====================================

What:  ORM model for `destinations`: the towns and regions accommodations,
       events and posts are attached to.
Owner: the creating user (`created_by_id`); editing is permission-based.
"""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hospeda.database import Base
from hospeda.models.base import AuditMixin, LifecycleMixin, ModerationMixin, VisibilityMixin


class Destination(AuditMixin, LifecycleMixin, VisibilityMixin, ModerationMixin, Base):
    __tablename__ = "destinations"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    summary: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Destination(id={self.id}, slug='{self.slug}')>"
