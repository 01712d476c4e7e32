"""
Hospeda Backend — Post Model
=============================

What:  ORM model for `posts`: editorial articles and news.
Owner: `author_id`.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hospeda.database import Base
from hospeda.models.base import AuditMixin, LifecycleMixin, ModerationMixin, VisibilityMixin


class Post(AuditMixin, LifecycleMixin, VisibilityMixin, ModerationMixin, Base):
    __tablename__ = "posts"

    title: Mapped[str] = mapped_column(String(150), nullable=False)
    slug: Mapped[str] = mapped_column(String(170), nullable=False, unique=True)
    summary: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False)

    author_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    is_news: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, slug='{self.slug}')>"
