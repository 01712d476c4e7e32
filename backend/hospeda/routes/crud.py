"""
Hospeda Backend — Generic CRUD Router
======================================

What:  `build_crud_router()` produces the standard endpoint set for one
       entity service.
Why:   Every entity exposes the same verbs; the router is written once and
       parameterized by service class.

Endpoints (prefix = /api/v1/<plural>):
    GET    /                     list      ?page&pageSize&q&sortBy&sortOrder&<filters>
    GET    /count                count     ?<filters>
    GET    /<lookup>/{value}     get by a unique field (slug, email, number)
    GET    /{entity_id}          get by id
    POST   /                     create                                   → 201
    PUT    /{entity_id}          partial update
    PATCH  /{entity_id}          partial update
    DELETE /{entity_id}          soft delete                              → {"count"}
    POST   /{entity_id}/restore  restore                                  → {"count"}
    DELETE /{entity_id}/hard     hard delete                              → {"count"}
    PATCH  /{entity_id}/visibility                                         (visibility entities)

Reads accept the guest actor; every mutation requires an identified actor
and answers 401 otherwise. Fixed paths are registered before
`/{entity_id}` so they are never captured by it.
"""

from typing import Any, Dict, Mapping, Optional, Type

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from hospeda.permissions import Actor
from hospeda.responses import success_response
from hospeda.routes.dependencies import get_actor, require_authenticated_actor, service_provider
from hospeda.schemas.common import ERROR_RESPONSES, SuccessEnvelope
from hospeda.services.base import BaseCrudService
from hospeda.services.result import ServiceOutput


def unwrap(output: ServiceOutput) -> Any:
    """Returns the data or raises the error for the global exception handler."""
    if output.error is not None:
        raise output.error.to_exception()
    return output.data


def respond(output: ServiceOutput, status_code: int = 200) -> JSONResponse:
    return success_response(unwrap(output), status_code=status_code)


def query_filters(request: Request) -> Dict[str, Any]:
    """Flat query-string mapping; repeated keys keep their last value."""
    return dict(request.query_params)


def build_crud_router(
    *,
    prefix: str,
    tag: str,
    service_cls: Type[BaseCrudService],
    lookups: Optional[Mapping[str, str]] = None,
    with_visibility: bool = False,
) -> APIRouter:
    """
    Args:
        prefix:          URL prefix, e.g. "/api/v1/destinations"
        tag:             OpenAPI tag
        service_cls:     BaseCrudService subclass serving the routes
        lookups:         path segment → unique field, e.g. {"slug": "slug"}
        with_visibility: add PATCH /{entity_id}/visibility
    """
    router = APIRouter(prefix=prefix, tags=[tag], responses=ERROR_RESPONSES)
    get_service = service_provider(service_cls)
    label = service_cls.entity_name

    @router.get("", response_model=SuccessEnvelope, summary=f"List {label} records")
    async def list_entities(
        request: Request,
        actor: Actor = Depends(get_actor),
        service: BaseCrudService = Depends(get_service),
    ) -> JSONResponse:
        return respond(await service.list(actor, query_filters(request)))

    @router.get("/count", response_model=SuccessEnvelope, summary=f"Count {label} records")
    async def count_entities(
        request: Request,
        actor: Actor = Depends(get_actor),
        service: BaseCrudService = Depends(get_service),
    ) -> JSONResponse:
        output = await service.count(actor, query_filters(request))
        return success_response({"count": unwrap(output)})

    for segment, field in (lookups or {}).items():
        _add_lookup_route(router, get_service, label, segment, field)

    @router.get("/{entity_id}", response_model=SuccessEnvelope, summary=f"Get a {label} by id")
    async def get_entity(
        entity_id: str,
        actor: Actor = Depends(get_actor),
        service: BaseCrudService = Depends(get_service),
    ) -> JSONResponse:
        return respond(await service.get_by_id(actor, entity_id))

    @router.post("", status_code=201, response_model=SuccessEnvelope, summary=f"Create a {label}")
    async def create_entity(
        payload: Any = Body(default=None),
        actor: Actor = Depends(require_authenticated_actor),
        service: BaseCrudService = Depends(get_service),
    ) -> JSONResponse:
        return respond(await service.create(actor, payload), status_code=201)

    async def update_entity(
        entity_id: str,
        payload: Any = Body(default=None),
        actor: Actor = Depends(require_authenticated_actor),
        service: BaseCrudService = Depends(get_service),
    ) -> JSONResponse:
        return respond(await service.update(actor, entity_id, payload))

    router.add_api_route(
        "/{entity_id}", update_entity, methods=["PUT"], response_model=SuccessEnvelope,
        summary=f"Update a {label}", name=f"replace_{label}",
    )
    router.add_api_route(
        "/{entity_id}", update_entity, methods=["PATCH"], response_model=SuccessEnvelope,
        summary=f"Partially update a {label}", name=f"patch_{label}",
    )

    @router.delete("/{entity_id}", response_model=SuccessEnvelope, summary=f"Soft delete a {label}")
    async def soft_delete_entity(
        entity_id: str,
        actor: Actor = Depends(require_authenticated_actor),
        service: BaseCrudService = Depends(get_service),
    ) -> JSONResponse:
        return respond(await service.soft_delete(actor, entity_id))

    @router.post("/{entity_id}/restore", response_model=SuccessEnvelope, summary=f"Restore a {label}")
    async def restore_entity(
        entity_id: str,
        actor: Actor = Depends(require_authenticated_actor),
        service: BaseCrudService = Depends(get_service),
    ) -> JSONResponse:
        return respond(await service.restore(actor, entity_id))

    @router.delete("/{entity_id}/hard", response_model=SuccessEnvelope, summary=f"Permanently delete a {label}")
    async def hard_delete_entity(
        entity_id: str,
        actor: Actor = Depends(require_authenticated_actor),
        service: BaseCrudService = Depends(get_service),
    ) -> JSONResponse:
        return respond(await service.hard_delete(actor, entity_id))

    if with_visibility:
        @router.patch(
            "/{entity_id}/visibility",
            response_model=SuccessEnvelope,
            summary=f"Change a {label}'s visibility",
        )
        async def update_entity_visibility(
            entity_id: str,
            payload: Any = Body(default=None),
            actor: Actor = Depends(require_authenticated_actor),
            service: BaseCrudService = Depends(get_service),
        ) -> JSONResponse:
            visibility = payload.get("visibility") if isinstance(payload, dict) else None
            return respond(await service.update_visibility(actor, entity_id, visibility))

    return router


def _add_lookup_route(router: APIRouter, get_service, label: str, segment: str, field: str) -> None:
    @router.get(
        f"/{segment}/{{value}}",
        response_model=SuccessEnvelope,
        summary=f"Get a {label} by {field}",
        name=f"get_{label}_by_{field}",
    )
    async def get_by_lookup(
        value: str,
        actor: Actor = Depends(get_actor),
        service: BaseCrudService = Depends(get_service),
    ) -> JSONResponse:
        return respond(await service.get_by_field(actor, field, value))
