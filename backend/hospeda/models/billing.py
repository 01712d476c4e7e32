"""
Hospeda Backend — Billing Models
=================================

What:  `clients`, `subscriptions` and `invoices`: the billing objects behind
       paid listings.
Owner: a client belongs to the platform user in `user_id`; subscriptions and
       invoices have no owner and are governed by permissions only.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Date, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hospeda.database import Base
from hospeda.enums import InvoiceStatusEnum, SubscriptionStatusEnum
from hospeda.models.base import AuditMixin, LifecycleMixin


class Client(AuditMixin, LifecycleMixin, Base):
    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    billing_email: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name='{self.name}')>"


class Subscription(AuditMixin, Base):
    __tablename__ = "subscriptions"

    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("clients.id"), nullable=False, index=True
    )
    plan_name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubscriptionStatusEnum.ACTIVE.value
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    cancel_at_period_end: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Subscription(id={self.id}, client_id={self.client_id}, status='{self.status}')>"


class Invoice(AuditMixin, Base):
    __tablename__ = "invoices"

    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("clients.id"), nullable=False, index=True
    )
    invoice_number: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InvoiceStatusEnum.DRAFT.value
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="ARS")
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    tax: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    issued_at: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, number='{self.invoice_number}', total={self.total})>"
