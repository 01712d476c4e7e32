"""
Hospeda Backend — Billing Routes
=================================

What:  CRUD for clients, subscriptions and invoices, plus invoice lookup by
       number (`/api/v1/invoices/number/{invoice_number}`).
Who:   Admin dashboard billing screens. Subscriptions and invoices are
       permission-only: listing them needs the matching view permission.
"""

from hospeda.routes.crud import build_crud_router
from hospeda.services.billing_service import ClientService, InvoiceService, SubscriptionService

clients = build_crud_router(
    prefix="/api/v1/clients",
    tag="Billing",
    service_cls=ClientService,
)

subscriptions = build_crud_router(
    prefix="/api/v1/subscriptions",
    tag="Billing",
    service_cls=SubscriptionService,
)

invoices = build_crud_router(
    prefix="/api/v1/invoices",
    tag="Billing",
    service_cls=InvoiceService,
    lookups={"number": "invoice_number"},
)

routers = [clients, subscriptions, invoices]
