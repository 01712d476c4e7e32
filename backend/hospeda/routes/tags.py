"""
Hospeda Backend — Tag Routes
=============================

What:  /api/v1/tags CRUD plus the tag ↔ entity association endpoints:

    GET    /api/v1/tags/popular?limit=10                          most used tags
    GET    /api/v1/tags/entity/{entity_type}/{entity_id}          tags on one entity
    GET    /api/v1/tags/{tag_id}/entities?entityType=             entity ids carrying a tag
    POST   /api/v1/tags/{tag_id}/entities/{entity_type}/{entity_id}   attach
    DELETE /api/v1/tags/{tag_id}/entities/{entity_type}/{entity_id}   detach

The association router is mounted ahead of the CRUD router so `/popular`
and `/entity/...` are not read as tag ids.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from hospeda.permissions import Actor
from hospeda.routes.crud import build_crud_router, respond
from hospeda.routes.dependencies import get_actor, require_authenticated_actor, service_provider
from hospeda.schemas.common import ERROR_RESPONSES, SuccessEnvelope
from hospeda.services.tag_service import TagService

PREFIX = "/api/v1/tags"

get_tag_service = service_provider(TagService)

associations = APIRouter(prefix=PREFIX, tags=["Tags"], responses=ERROR_RESPONSES)


@associations.get("/popular", response_model=SuccessEnvelope, summary="Most used tags")
async def popular_tags(
    limit: Optional[int] = Query(default=None, description="How many tags to return (1-50, default 10)"),
    actor: Actor = Depends(get_actor),
    service: TagService = Depends(get_tag_service),
) -> JSONResponse:
    return respond(await service.get_popular_tags(actor, limit))


@associations.get(
    "/entity/{entity_type}/{entity_id}",
    response_model=SuccessEnvelope,
    summary="Tags attached to an entity",
)
async def tags_for_entity(
    entity_type: str,
    entity_id: str,
    actor: Actor = Depends(get_actor),
    service: TagService = Depends(get_tag_service),
) -> JSONResponse:
    return respond(await service.get_tags_for_entity(actor, entity_type.upper(), entity_id))


@associations.get(
    "/{tag_id}/entities",
    response_model=SuccessEnvelope,
    summary="Ids of the entities carrying a tag",
)
async def entities_for_tag(
    tag_id: str,
    entity_type: Optional[str] = Query(default=None, alias="entityType"),
    actor: Actor = Depends(get_actor),
    service: TagService = Depends(get_tag_service),
) -> JSONResponse:
    kind = entity_type.upper() if entity_type else None
    return respond(await service.get_entity_ids_for_tag(actor, tag_id, kind))


@associations.post(
    "/{tag_id}/entities/{entity_type}/{entity_id}",
    response_model=SuccessEnvelope,
    summary="Attach a tag to an entity",
)
async def add_tag_to_entity(
    tag_id: str,
    entity_type: str,
    entity_id: str,
    actor: Actor = Depends(require_authenticated_actor),
    service: TagService = Depends(get_tag_service),
) -> JSONResponse:
    return respond(await service.add_tag_to_entity(actor, tag_id, entity_type.upper(), entity_id))


@associations.delete(
    "/{tag_id}/entities/{entity_type}/{entity_id}",
    response_model=SuccessEnvelope,
    summary="Detach a tag from an entity",
)
async def remove_tag_from_entity(
    tag_id: str,
    entity_type: str,
    entity_id: str,
    actor: Actor = Depends(require_authenticated_actor),
    service: TagService = Depends(get_tag_service),
) -> JSONResponse:
    return respond(await service.remove_tag_from_entity(actor, tag_id, entity_type.upper(), entity_id))


crud = build_crud_router(
    prefix=PREFIX,
    tag="Tags",
    service_cls=TagService,
    lookups={"slug": "slug"},
)

routers = [associations, crud]
