"""
Hospeda Backend — Catalog Services
===================================

What:  Destinations, accommodations, events and posts: the publishable
       content of the platform.
Why:   All four carry lifecycle, visibility and moderation state and share the
       same slug and ownership rules, so they live together.

Rules layered on top of BaseCrudService:
    - slugs are generated from the name (title for posts) when omitted and
      must be unique
    - `is_featured` and `moderation_state` are editorial fields: only
      elevated roles may set them
    - the owner field (owner_id / author_id) defaults to the acting user;
      pointing it at someone else is an elevated-only action
    - cross-field ranges are re-checked on update against the stored row,
      since a partial payload may carry only one side of the range
"""

from typing import Any, Dict, Optional

from hospeda.exceptions import ServiceError, ServiceErrorCode
from hospeda.permissions import Actor
from hospeda.permissions.policies import (
    ACCOMMODATION_POLICY,
    DESTINATION_POLICY,
    EVENT_POLICY,
    POST_POLICY,
)
from hospeda.repositories.entities import (
    AccommodationRepository,
    DestinationRepository,
    EventRepository,
    PostRepository,
)
from hospeda.schemas.accommodation import (
    AccommodationCreate,
    AccommodationRead,
    AccommodationSearch,
    AccommodationUpdate,
)
from hospeda.schemas.destination import (
    DestinationCreate,
    DestinationRead,
    DestinationSearch,
    DestinationUpdate,
)
from hospeda.schemas.event import EventCreate, EventRead, EventSearch, EventUpdate
from hospeda.schemas.post import PostCreate, PostRead, PostSearch, PostUpdate
from hospeda.services.base import ELEVATED_ONLY, SluggedCrudService

EDITORIAL_FIELDS = {"is_featured": ELEVATED_ONLY, "moderation_state": ELEVATED_ONLY}


def check_range(values: Dict[str, Any], entity: Any, lower: str, upper: str, strict: bool = False) -> None:
    """Validates `lower <= upper` using the payload first, then the stored row."""
    if lower not in values and upper not in values:
        return
    low = values[lower] if lower in values else getattr(entity, lower, None)
    high = values[upper] if upper in values else getattr(entity, upper, None)
    if low is None or high is None:
        return
    try:
        out_of_order = high < low or (strict and high == low)
    except TypeError:
        raise ServiceError(ServiceErrorCode.VALIDATION_ERROR, f"{upper}: cannot be compared with {lower}")
    if out_of_order:
        relation = "after" if strict else "on or after"
        raise ServiceError(ServiceErrorCode.VALIDATION_ERROR, f"{upper}: must be {relation} {lower}")


class OwnedContentService(SluggedCrudService):
    """Slugged content whose owner column defaults to the acting user."""

    owner_field = "owner_id"

    def _assign_owner(self, actor: Actor, values: Dict[str, Any]) -> None:
        requested = values.get(self.owner_field)
        if requested is None:
            if actor.id is None:
                raise ServiceError(
                    ServiceErrorCode.VALIDATION_ERROR,
                    f"{self.owner_field}: Field required",
                )
            values[self.owner_field] = actor.id
        elif requested != actor.id and not actor.is_elevated:
            raise ServiceError(
                ServiceErrorCode.FORBIDDEN,
                f"Permission denied: cannot assign {self.entity_name} records to another user.",
            )

    async def _before_create(self, actor: Actor, values: Dict[str, Any]) -> Dict[str, Any]:
        self._assign_owner(actor, values)
        return await super()._before_create(actor, values)

    async def _before_update(self, actor: Actor, entity: Any, values: Dict[str, Any]) -> Dict[str, Any]:
        if self.owner_field in values and values[self.owner_field] != getattr(entity, self.owner_field):
            if not actor.is_elevated:
                raise ServiceError(
                    ServiceErrorCode.FORBIDDEN,
                    f"Permission denied: cannot transfer this {self.entity_name} to another user.",
                )
        return await super()._before_update(actor, entity, values)


class DestinationService(SluggedCrudService):
    entity_name = "destination"
    repository_cls = DestinationRepository
    policy = DESTINATION_POLICY
    create_schema = DestinationCreate
    update_schema = DestinationUpdate
    search_schema = DestinationSearch
    read_schema = DestinationRead
    restricted_fields = EDITORIAL_FIELDS


class AccommodationService(OwnedContentService):
    entity_name = "accommodation"
    repository_cls = AccommodationRepository
    policy = ACCOMMODATION_POLICY
    create_schema = AccommodationCreate
    update_schema = AccommodationUpdate
    search_schema = AccommodationSearch
    read_schema = AccommodationRead
    restricted_fields = EDITORIAL_FIELDS
    owner_field = "owner_id"

    def __init__(self, session, repository=None, destinations: Optional[DestinationRepository] = None):
        super().__init__(session, repository)
        self.destinations = destinations or DestinationRepository(session)

    async def _ensure_destination(self, destination_id) -> None:
        if await self.destinations.find_by_id(destination_id) is None:
            raise ServiceError.not_found("Destination", destination_id)

    async def _before_create(self, actor: Actor, values: Dict[str, Any]) -> Dict[str, Any]:
        await self._ensure_destination(values["destination_id"])
        return await super()._before_create(actor, values)

    async def _before_update(self, actor: Actor, entity: Any, values: Dict[str, Any]) -> Dict[str, Any]:
        if "destination_id" in values and values["destination_id"] != entity.destination_id:
            await self._ensure_destination(values["destination_id"])
        return await super()._before_update(actor, entity, values)


class EventService(OwnedContentService):
    entity_name = "event"
    repository_cls = EventRepository
    policy = EVENT_POLICY
    create_schema = EventCreate
    update_schema = EventUpdate
    search_schema = EventSearch
    read_schema = EventRead
    restricted_fields = EDITORIAL_FIELDS
    owner_field = "author_id"

    def __init__(self, session, repository=None, destinations: Optional[DestinationRepository] = None):
        super().__init__(session, repository)
        self.destinations = destinations or DestinationRepository(session)

    async def _before_create(self, actor: Actor, values: Dict[str, Any]) -> Dict[str, Any]:
        destination_id = values.get("destination_id")
        if destination_id is not None and await self.destinations.find_by_id(destination_id) is None:
            raise ServiceError.not_found("Destination", destination_id)
        return await super()._before_create(actor, values)

    async def _before_update(self, actor: Actor, entity: Any, values: Dict[str, Any]) -> Dict[str, Any]:
        check_range(values, entity, "start_date", "end_date")
        check_range(values, entity, "price_from", "price_to")
        destination_id = values.get("destination_id")
        if destination_id is not None and destination_id != entity.destination_id:
            if await self.destinations.find_by_id(destination_id) is None:
                raise ServiceError.not_found("Destination", destination_id)
        return await super()._before_update(actor, entity, values)


class PostService(OwnedContentService):
    entity_name = "post"
    repository_cls = PostRepository
    policy = POST_POLICY
    create_schema = PostCreate
    update_schema = PostUpdate
    search_schema = PostSearch
    read_schema = PostRead
    restricted_fields = EDITORIAL_FIELDS
    owner_field = "author_id"
    slug_source = "title"

    async def _before_update(self, actor: Actor, entity: Any, values: Dict[str, Any]) -> Dict[str, Any]:
        check_range(values, entity, "published_at", "expires_at", strict=True)
        return await super()._before_update(actor, entity, values)
