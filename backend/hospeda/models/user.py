"""
Hospeda Backend — User Model
=============================

What:  ORM model for the `users` table: platform accounts with a role and an
       explicit permission list.
Owner: a user owns its own row (ownership field is `id`).
"""

from typing import List, Optional

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from hospeda.database import Base
from hospeda.enums import RoleEnum
from hospeda.models.base import AuditMixin, LifecycleMixin


class User(AuditMixin, LifecycleMixin, Base):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=RoleEnum.USER.value)
    permissions: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
