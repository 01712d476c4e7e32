# Routes package init
"""
Hospeda Backend — API Routes Package
=====================================

What:  HTTP route handlers. Each one adapts a single service operation.

Route Inventory:
    - crud.py:     build_crud_router(), the shared list/count/get/create/
                   update/delete/restore/hard-delete/visibility endpoints
    - users.py:    /api/v1/users
    - tags.py:     /api/v1/tags plus tag ↔ entity association endpoints
    - catalog.py:  /api/v1/destinations, /accommodations, /events, /posts
    - billing.py:  /api/v1/clients, /subscriptions, /invoices
    - health.py:   GET /health

Design Principle:
    Routes stay thin: read the actor, path, query and body, call the
    service, and turn its ServiceOutput into the JSON envelope. Business
    rules live in services.
"""
