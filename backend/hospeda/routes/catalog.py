"""
Hospeda Backend — Catalog Routes
=================================

What:  CRUD for the publishable catalog: destinations, accommodations,
       events and posts. Each gets slug lookup and a visibility endpoint.
Who:   Public website (guest reads of published content) and the admin
       dashboard / host panel (mutations).
"""

from hospeda.routes.crud import build_crud_router
from hospeda.services.catalog_service import (
    AccommodationService,
    DestinationService,
    EventService,
    PostService,
)

SLUG_LOOKUP = {"slug": "slug"}

destinations = build_crud_router(
    prefix="/api/v1/destinations",
    tag="Destinations",
    service_cls=DestinationService,
    lookups=SLUG_LOOKUP,
    with_visibility=True,
)

accommodations = build_crud_router(
    prefix="/api/v1/accommodations",
    tag="Accommodations",
    service_cls=AccommodationService,
    lookups=SLUG_LOOKUP,
    with_visibility=True,
)

events = build_crud_router(
    prefix="/api/v1/events",
    tag="Events",
    service_cls=EventService,
    lookups=SLUG_LOOKUP,
    with_visibility=True,
)

posts = build_crud_router(
    prefix="/api/v1/posts",
    tag="Posts",
    service_cls=PostService,
    lookups=SLUG_LOOKUP,
    with_visibility=True,
)

routers = [destinations, accommodations, events, posts]
