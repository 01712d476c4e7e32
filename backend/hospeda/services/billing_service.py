"""
Hospeda Backend — Billing Services
===================================

What:  Clients, subscriptions and invoices.
How:   Subscriptions and invoices must reference a live client. Invoice
       amounts are re-derived on update from the payload merged over the
       stored row, so `total == subtotal + tax` holds after every write.
"""

from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hospeda.exceptions import ServiceError, ServiceErrorCode
from hospeda.permissions import Actor
from hospeda.permissions.policies import CLIENT_POLICY, INVOICE_POLICY, SUBSCRIPTION_POLICY
from hospeda.repositories.entities import ClientRepository, InvoiceRepository, SubscriptionRepository
from hospeda.schemas.billing import (
    ClientCreate,
    ClientRead,
    ClientSearch,
    ClientUpdate,
    InvoiceCreate,
    InvoiceRead,
    InvoiceSearch,
    InvoiceUpdate,
    SubscriptionCreate,
    SubscriptionRead,
    SubscriptionSearch,
    SubscriptionUpdate,
)
from hospeda.services.base import ELEVATED_ONLY, BaseCrudService
from hospeda.services.catalog_service import check_range


class ClientService(BaseCrudService):
    entity_name = "client"
    repository_cls = ClientRepository
    policy = CLIENT_POLICY
    create_schema = ClientCreate
    update_schema = ClientUpdate
    search_schema = ClientSearch
    read_schema = ClientRead
    restricted_fields = {"user_id": ELEVATED_ONLY}

    async def _before_create(self, actor: Actor, values: Dict[str, Any]) -> Dict[str, Any]:
        # Defaults to the creator's own account
        if "user_id" not in values and actor.id is not None:
            values["user_id"] = actor.id
        return values


class ClientBoundService(BaseCrudService):
    """Billing records that hang off a client."""

    def __init__(self, session: AsyncSession, repository=None, clients: Optional[ClientRepository] = None):
        super().__init__(session, repository)
        self.clients = clients or ClientRepository(session)

    async def _ensure_client(self, client_id) -> None:
        if await self.clients.find_by_id(client_id) is None:
            raise ServiceError.not_found("Client", client_id)

    async def _before_create(self, actor: Actor, values: Dict[str, Any]) -> Dict[str, Any]:
        await self._ensure_client(values["client_id"])
        return values

    async def _before_update(self, actor: Actor, entity: Any, values: Dict[str, Any]) -> Dict[str, Any]:
        if "client_id" in values and values["client_id"] != entity.client_id:
            await self._ensure_client(values["client_id"])
        return values


class SubscriptionService(ClientBoundService):
    entity_name = "subscription"
    repository_cls = SubscriptionRepository
    policy = SUBSCRIPTION_POLICY
    create_schema = SubscriptionCreate
    update_schema = SubscriptionUpdate
    search_schema = SubscriptionSearch
    read_schema = SubscriptionRead

    async def _before_update(self, actor: Actor, entity: Any, values: Dict[str, Any]) -> Dict[str, Any]:
        check_range(values, entity, "start_date", "end_date", strict=True)
        return await super()._before_update(actor, entity, values)


class InvoiceService(ClientBoundService):
    entity_name = "invoice"
    repository_cls = InvoiceRepository
    policy = INVOICE_POLICY
    create_schema = InvoiceCreate
    update_schema = InvoiceUpdate
    search_schema = InvoiceSearch
    read_schema = InvoiceRead
    lookup_fields = ("invoice_number",)

    async def _before_create(self, actor: Actor, values: Dict[str, Any]) -> Dict[str, Any]:
        values = await super()._before_create(actor, values)
        number = values["invoice_number"]
        if await self.repository.find_one({"invoice_number": number}, include_deleted=True) is not None:
            raise ServiceError(
                ServiceErrorCode.VALIDATION_ERROR,
                f"invoice_number: '{number}' is already in use",
            )
        if values.get("total") is None:
            values["total"] = values["subtotal"] + values.get("tax", Decimal("0"))
        return values

    async def _before_update(self, actor: Actor, entity: Any, values: Dict[str, Any]) -> Dict[str, Any]:
        check_range(values, entity, "issued_at", "due_date")
        if {"subtotal", "tax", "total"} & values.keys():
            subtotal = values.get("subtotal", entity.subtotal)
            tax = values.get("tax", entity.tax)
            expected = subtotal + tax
            if "total" in values and values["total"] != expected:
                raise ServiceError(
                    ServiceErrorCode.VALIDATION_ERROR,
                    f"total: total must equal subtotal + tax ({expected})",
                )
            values["total"] = expected
        return await super()._before_update(actor, entity, values)

    async def get_by_number(self, actor, invoice_number: str):
        return await self.get_by_field(actor, "invoice_number", invoice_number)
