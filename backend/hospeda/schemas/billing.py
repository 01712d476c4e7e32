"""
Billing schemas: clients, subscriptions and invoices.

Invoice totals are derived here: when `total` is omitted it is computed as
`subtotal + tax`, and an explicit total that disagrees is rejected.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Annotated, ClassVar, Optional

from pydantic import Field, ValidationInfo, field_validator, model_validator

from hospeda.enums import InvoiceStatusEnum, LifecycleStatusEnum, SubscriptionStatusEnum
from hospeda.schemas.common import (
    AuditRead,
    CurrencyCode,
    Email,
    HospedaSchema,
    LifecycleInput,
    LifecycleRead,
    SearchParams,
    ensure_not_before,
)

ClientName = Annotated[str, Field(min_length=2, max_length=100)]
PlanName = Annotated[str, Field(min_length=2, max_length=100)]
InvoiceNumber = Annotated[str, Field(min_length=1, max_length=40, pattern=r"^[A-Za-z0-9-]+$")]
Amount = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]
InvoiceNotes = Annotated[str, Field(max_length=1000)]


# ── Client ────────────────────────────────────────────────────────────────
class ClientCreate(LifecycleInput):
    name: ClientName
    billing_email: Email
    user_id: Optional[uuid.UUID] = None


class ClientUpdate(LifecycleInput):
    name: Optional[ClientName] = None
    billing_email: Optional[Email] = None
    user_id: Optional[uuid.UUID] = None


class ClientSearch(SearchParams):
    user_id: Optional[uuid.UUID] = None
    lifecycle_state: Optional[LifecycleStatusEnum] = None


class ClientRead(LifecycleRead):
    name: str
    billing_email: str
    user_id: Optional[uuid.UUID] = None


# ── Subscription ──────────────────────────────────────────────────────────
class SubscriptionRules(HospedaSchema):
    @field_validator("end_date", check_fields=False)
    @classmethod
    def end_after_start(cls, v: Optional[date], info: ValidationInfo) -> Optional[date]:
        return ensure_not_before(v, info, "start_date", strict=True)


class SubscriptionCreate(SubscriptionRules):
    client_id: uuid.UUID
    plan_name: PlanName
    status: Optional[SubscriptionStatusEnum] = None
    start_date: date
    end_date: Optional[date] = None
    cancel_at_period_end: Optional[bool] = None


class SubscriptionUpdate(SubscriptionRules):
    client_id: Optional[uuid.UUID] = None
    plan_name: Optional[PlanName] = None
    status: Optional[SubscriptionStatusEnum] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    cancel_at_period_end: Optional[bool] = None


class SubscriptionSearch(SearchParams):
    client_id: Optional[uuid.UUID] = None
    status: Optional[SubscriptionStatusEnum] = None


class SubscriptionRead(AuditRead):
    client_id: uuid.UUID
    plan_name: str
    status: str
    start_date: date
    end_date: Optional[date] = None
    cancel_at_period_end: bool


# ── Invoice ───────────────────────────────────────────────────────────────
class InvoiceRules(HospedaSchema):
    # Partial payloads are checked against the stored amounts by the service
    partial: ClassVar[bool] = False

    @field_validator("due_date", check_fields=False)
    @classmethod
    def due_not_before_issue(cls, v: Optional[date], info: ValidationInfo) -> Optional[date]:
        return ensure_not_before(v, info, "issued_at")

    @model_validator(mode="after")
    def total_matches_amounts(self):
        subtotal = getattr(self, "subtotal", None)
        if subtotal is None or (self.partial and self.tax is None):
            return self
        tax = self.tax if self.tax is not None else Decimal("0")
        expected = subtotal + tax
        if self.total is None:
            if "subtotal" in self.model_fields_set or "tax" in self.model_fields_set:
                self.total = expected
        elif self.total != expected:
            raise ValueError(f"total must equal subtotal + tax ({expected})")
        return self


class InvoiceCreate(InvoiceRules):
    client_id: uuid.UUID
    invoice_number: InvoiceNumber
    status: Optional[InvoiceStatusEnum] = None
    currency: Optional[CurrencyCode] = None
    subtotal: Amount
    tax: Optional[Amount] = None
    total: Optional[Amount] = None
    issued_at: date
    due_date: date
    notes: Optional[InvoiceNotes] = None


class InvoiceUpdate(InvoiceRules):
    partial: ClassVar[bool] = True

    status: Optional[InvoiceStatusEnum] = None
    currency: Optional[CurrencyCode] = None
    subtotal: Optional[Amount] = None
    tax: Optional[Amount] = None
    total: Optional[Amount] = None
    issued_at: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[InvoiceNotes] = None


class InvoiceSearch(SearchParams):
    client_id: Optional[uuid.UUID] = None
    status: Optional[InvoiceStatusEnum] = None
    invoice_number: Optional[str] = None


class InvoiceRead(AuditRead):
    client_id: uuid.UUID
    invoice_number: str
    status: str
    currency: str
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    issued_at: date
    due_date: date
    notes: Optional[str] = None
