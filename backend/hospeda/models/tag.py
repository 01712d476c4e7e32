"""
Hospeda Backend — Tag and Entity-Tag Relation Models
=====================================================

What:  `tags` holds reusable labels; `r_entity_tag` is the many-to-many
       association between a tag and any taggable entity.
How:   The relation row stores the target's id and type instead of a foreign
       key per entity table, so one table serves every taggable entity.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hospeda.database import Base
from hospeda.enums import TagColorEnum
from hospeda.models.base import AuditMixin, LifecycleMixin, utcnow


class Tag(AuditMixin, LifecycleMixin, Base):
    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    slug: Mapped[str] = mapped_column(String(60), nullable=False, unique=True)
    color: Mapped[str] = mapped_column(String(20), nullable=False, default=TagColorEnum.BLUE.value)
    icon: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, slug='{self.slug}')>"


class EntityTag(Base):
    __tablename__ = "r_entity_tag"

    tag_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True
    )
    entity_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    entity_type: Mapped[str] = mapped_column(String(30), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    __table_args__ = (
        Index("idx_entity_tag_entity", "entity_type", "entity_id"),
    )

    def __repr__(self) -> str:
        return f"<EntityTag(tag_id={self.tag_id}, {self.entity_type}:{self.entity_id})>"
