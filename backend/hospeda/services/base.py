"""
Hospeda Backend — Generic CRUD Service
=======================================

What:  `BaseCrudService`, the single orchestration point for every entity's
       create / read / update / delete / restore / list / count behavior.
Why:   Validation, permission checks, lifecycle hooks and error mapping are
       written once; entity services only declare their schemas, policy and
       whatever hooks they need.
How:   Every public method wraps its body in `_run`, which guarantees a
       ServiceOutput comes back no matter what happens inside.

Operation Flow:
    ┌──────────┐   ┌──────────┐   ┌───────────┐   ┌───────┐   ┌────────────┐
    │ validate │──▶│authorize │──▶│before hook│──▶│persist│──▶│ after hook │
    └──────────┘   └──────────┘   └───────────┘   └───────┘   └────────────┘

    update / delete / restore first load the existing record (NOT_FOUND if
    absent) so that authorization is ownership-aware.

Error Mapping (inside _run):
    actor is None                → UNAUTHORIZED
    ServiceError raised          → its own code (validation, forbidden, not found)
    anything else                → INTERNAL_ERROR; session rolled back; the
                                   original message is logged, not returned

Design Decision:
    Services are instantiated per request with the request's AsyncSession,
    like the repositories they own. Nothing about the actor or the request
    is stored on the instance between calls.
"""

import logging
import re
import unicodedata
import uuid
from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hospeda.exceptions import ServiceError, ServiceErrorCode
from hospeda.models.base import SERVER_MANAGED_FIELDS
from hospeda.permissions import (
    Actor,
    EntityPolicy,
    Operation,
    can_perform,
    describe_denial,
    has_permission,
    visibility_scope,
)
from hospeda.repositories.base import BaseRepository, Range
from hospeda.schemas.common import PAGINATION_FIELDS, VisibilityUpdate
from hospeda.schemas.validation import validate_input
from hospeda.services.result import Page, ServiceOutput

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Restricted-field marker: only elevated roles may write the field
ELEVATED_ONLY = None


def slugify(value: str, max_length: int = 100) -> str:
    """ASCII, lower-case, hyphen-separated slug (`"Colón & Río"` → `"colon-rio"`)."""
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug[:max_length].rstrip("-") or "item"


def parse_id(value: Any, field: str = "id") -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise ServiceError(
            ServiceErrorCode.VALIDATION_ERROR,
            f"{field}: Input should be a valid UUID",
        ) from None


class BaseCrudService:
    """
    Generic permission-checked CRUD over one entity.

    Subclasses set:
        entity_name        label used in messages and logs
        repository_cls     BaseRepository subclass for the model
        policy             EntityPolicy consulted by can_perform
        create_schema / update_schema / search_schema / read_schema
        restricted_fields  field → permission needed to write it (ELEVATED_ONLY for admins)
        lookup_fields      columns accepted by get_by_field
    """

    entity_name: str = "entity"
    repository_cls: Type[BaseRepository] = BaseRepository
    policy: EntityPolicy
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    search_schema: Type[BaseModel]
    read_schema: Type[BaseModel]
    restricted_fields: Mapping[str, Any] = {}
    lookup_fields: Sequence[str] = ()

    def __init__(self, session: AsyncSession, repository: Optional[BaseRepository] = None):
        self.session = session
        self.repository = repository or self.repository_cls(session)

    @property
    def model(self):
        return self.repository.model

    # ══════════════════════════════════════════════════════════════════════
    # Execution wrapper
    # ══════════════════════════════════════════════════════════════════════

    async def _run(
        self,
        operation: str,
        actor: Optional[Actor],
        body: Callable[[Actor], Awaitable[T]],
    ) -> ServiceOutput[T]:
        actor_id = str(actor.id) if actor is not None and actor.id is not None else None
        log_extra = {"entity": self.entity_name, "operation": operation, "actor_id": actor_id}

        if actor is None:
            logger.warning("%s.%s rejected: no actor", self.entity_name, operation, extra=log_extra)
            return ServiceOutput.fail(ServiceErrorCode.UNAUTHORIZED, "Authentication required.")

        logger.debug("%s.%s started by %s", self.entity_name, operation, actor_id, extra=log_extra)
        try:
            data = await body(actor)
        except ServiceError as exc:
            logger.info(
                "%s.%s rejected for %s: %s %s",
                self.entity_name,
                operation,
                actor_id,
                exc.code.value,
                exc.message,
                extra=log_extra,
            )
            return ServiceOutput.fail(exc.code, exc.message)
        except Exception as exc:
            logger.error(
                "%s.%s failed for %s: %s",
                self.entity_name,
                operation,
                actor_id,
                str(exc),
                exc_info=True,
                extra=log_extra,
            )
            await self._rollback()
            return ServiceOutput.fail(
                ServiceErrorCode.INTERNAL_ERROR,
                f"An unexpected error occurred while trying to {operation} the {self.entity_name}.",
            )

        logger.info("%s.%s completed for %s", self.entity_name, operation, actor_id, extra=log_extra)
        return ServiceOutput.ok(data)

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError:
            logger.error("Rollback failed after %s error", self.entity_name, exc_info=True)

    # ══════════════════════════════════════════════════════════════════════
    # Shared steps
    # ══════════════════════════════════════════════════════════════════════

    def _authorize(self, actor: Actor, operation: Operation, entity: Any = None) -> None:
        result = can_perform(actor, operation, self.policy, entity)
        if not result.allowed:
            raise ServiceError(
                ServiceErrorCode.FORBIDDEN,
                describe_denial(self.policy, operation, result),
                context={"reason": result.reason.value},
            )

    def _check_restricted_fields(self, actor: Actor, values: Mapping[str, Any]) -> None:
        for name, permission in self.restricted_fields.items():
            if name not in values or actor.is_elevated:
                continue
            if permission is ELEVATED_ONLY or not has_permission(actor, permission):
                raise ServiceError(
                    ServiceErrorCode.FORBIDDEN,
                    f"Permission denied: cannot set '{name}' on {self.entity_name} records.",
                )

    def _clean_values(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Drops server-managed keys and nulls aimed at NOT NULL columns."""
        columns = self.model.__table__.columns
        cleaned = {}
        for name, value in values.items():
            if name in SERVER_MANAGED_FIELDS:
                continue
            if value is None and name in columns and not columns[name].nullable:
                continue
            cleaned[name] = value
        return cleaned

    async def _get_existing(self, entity_id: Any, include_deleted: bool = False):
        entity_uuid = parse_id(entity_id)
        entity = await self.repository.find_by_id(entity_uuid, include_deleted=include_deleted)
        if entity is None:
            raise ServiceError.not_found(self.entity_name.capitalize(), entity_uuid)
        return entity

    def _to_read(self, entity: Any) -> BaseModel:
        return self.read_schema.model_validate(entity)

    # ══════════════════════════════════════════════════════════════════════
    # Lifecycle hooks (no-ops unless overridden)
    # ══════════════════════════════════════════════════════════════════════

    async def _before_create(self, actor: Actor, values: Dict[str, Any]) -> Dict[str, Any]:
        return values

    async def _after_create(self, actor: Actor, entity: Any) -> Any:
        return entity

    async def _before_update(self, actor: Actor, entity: Any, values: Dict[str, Any]) -> Dict[str, Any]:
        return values

    async def _after_update(self, actor: Actor, entity: Any) -> Any:
        return entity

    async def _before_soft_delete(self, actor: Actor, entity: Any) -> None:
        return None

    async def _after_soft_delete(self, actor: Actor, entity: Any) -> None:
        return None

    async def _before_restore(self, actor: Actor, entity: Any) -> None:
        return None

    async def _after_restore(self, actor: Actor, entity: Any) -> None:
        return None

    async def _before_hard_delete(self, actor: Actor, entity: Any) -> None:
        return None

    async def _after_hard_delete(self, actor: Actor, entity: Any) -> None:
        return None

    async def _before_list(self, actor: Actor, filters: Dict[str, Any]) -> Dict[str, Any]:
        return filters

    async def _after_list(self, actor: Actor, items: List[Any]) -> List[Any]:
        return items

    # ══════════════════════════════════════════════════════════════════════
    # Public operations
    # ══════════════════════════════════════════════════════════════════════

    async def create(self, actor: Optional[Actor], data: Any) -> ServiceOutput:
        async def body(actor: Actor):
            payload = validate_input(self.create_schema, data)
            self._authorize(actor, Operation.CREATE)
            values = self._clean_values(payload.model_dump(exclude_unset=True))
            self._check_restricted_fields(actor, values)
            values = await self._before_create(actor, values)
            values.update(created_by_id=actor.id, updated_by_id=actor.id)
            entity = await self.repository.create(values)
            entity = await self._after_create(actor, entity)
            return self._to_read(entity)

        return await self._run("create", actor, body)

    async def get_by_id(self, actor: Optional[Actor], entity_id: Any) -> ServiceOutput:
        async def body(actor: Actor):
            entity = await self._get_existing(entity_id)
            self._authorize(actor, Operation.VIEW, entity)
            return self._to_read(entity)

        return await self._run("getById", actor, body)

    async def get_by_field(self, actor: Optional[Actor], field: str, value: Any) -> ServiceOutput:
        async def body(actor: Actor):
            if field not in self.lookup_fields:
                raise ServiceError(
                    ServiceErrorCode.VALIDATION_ERROR,
                    f"{field}: lookup is not supported for {self.entity_name} records",
                )
            if value is None or value == "":
                raise ServiceError(ServiceErrorCode.VALIDATION_ERROR, f"{field}: Field required")
            entity = await self.repository.find_one({field: value})
            if entity is None:
                raise ServiceError(
                    ServiceErrorCode.NOT_FOUND,
                    f"{self.entity_name.capitalize()} with {field} '{value}' was not found",
                )
            self._authorize(actor, Operation.VIEW, entity)
            return self._to_read(entity)

        return await self._run("getByField", actor, body)

    async def update(self, actor: Optional[Actor], entity_id: Any, data: Any) -> ServiceOutput:
        async def body(actor: Actor):
            entity = await self._get_existing(entity_id)
            payload = validate_input(self.update_schema, data)
            values = self._clean_values(payload.model_dump(exclude_unset=True))
            if not values:
                raise ServiceError(
                    ServiceErrorCode.VALIDATION_ERROR,
                    "No valid fields provided for update.",
                )
            self._authorize(actor, Operation.UPDATE, entity)
            if "visibility" in values and self.policy.has_visibility:
                self._authorize(actor, Operation.UPDATE_VISIBILITY, entity)
            self._check_restricted_fields(actor, values)
            values = await self._before_update(actor, entity, values)
            values["updated_by_id"] = actor.id
            updated = await self.repository.update(entity, values)
            updated = await self._after_update(actor, updated)
            return self._to_read(updated)

        return await self._run("update", actor, body)

    async def soft_delete(self, actor: Optional[Actor], entity_id: Any) -> ServiceOutput:
        async def body(actor: Actor):
            entity = await self._get_existing(entity_id, include_deleted=True)
            self._authorize(actor, Operation.SOFT_DELETE, entity)
            if entity.deleted_at is not None:
                return {"count": 0}
            await self._before_soft_delete(actor, entity)
            count = await self.repository.soft_delete(entity, actor.id)
            await self._after_soft_delete(actor, entity)
            return {"count": count}

        return await self._run("softDelete", actor, body)

    async def restore(self, actor: Optional[Actor], entity_id: Any) -> ServiceOutput:
        async def body(actor: Actor):
            entity = await self._get_existing(entity_id, include_deleted=True)
            self._authorize(actor, Operation.RESTORE, entity)
            if entity.deleted_at is None:
                return {"count": 0}
            await self._before_restore(actor, entity)
            count = await self.repository.restore(entity)
            await self._after_restore(actor, entity)
            return {"count": count}

        return await self._run("restore", actor, body)

    async def hard_delete(self, actor: Optional[Actor], entity_id: Any) -> ServiceOutput:
        async def body(actor: Actor):
            entity = await self._get_existing(entity_id, include_deleted=True)
            self._authorize(actor, Operation.HARD_DELETE, entity)
            await self._before_hard_delete(actor, entity)
            count = await self.repository.hard_delete(entity)
            await self._after_hard_delete(actor, entity)
            return {"count": count}

        return await self._run("hardDelete", actor, body)

    def _split_search(self, filters: Optional[Mapping[str, Any]], pagination: Optional[Mapping[str, Any]]):
        params = validate_input(self.search_schema, {**(filters or {}), **(pagination or {})})
        dumped = params.model_dump(exclude_none=True)
        options = {name: dumped.pop(name) for name in PAGINATION_FIELDS if name in dumped}
        range_fields = getattr(self.search_schema, "range_filters", {})
        bounds = {name: dumped.pop(name) for name in range_fields if name in dumped}
        for name, value in bounds.items():
            column, side = range_fields[name]
            dumped[column] = replace(dumped.get(column, Range()), **{side: value})
        sort_by = options.get("sort_by")
        if sort_by is not None and sort_by not in self.model.__table__.columns:
            raise ServiceError(
                ServiceErrorCode.VALIDATION_ERROR,
                f"sortBy: unknown field '{sort_by}' for {self.entity_name} records",
            )
        return dumped, options

    async def list(
        self,
        actor: Optional[Actor],
        filters: Optional[Mapping[str, Any]] = None,
        pagination: Optional[Mapping[str, Any]] = None,
    ) -> ServiceOutput:
        async def body(actor: Actor):
            where, options = self._split_search(filters, pagination)
            self._authorize(actor, Operation.LIST)
            where = await self._before_list(actor, where)
            items, total = await self.repository.find_all(
                filters=where,
                page=options["page"],
                page_size=options["page_size"],
                q=options.get("q"),
                scope=visibility_scope(actor, self.policy, self.model),
                sort_by=options.get("sort_by"),
                sort_order=options.get("sort_order", "desc"),
            )
            items = await self._after_list(actor, items)
            return Page(
                items=[self._to_read(item) for item in items],
                total=total,
                page=options["page"],
                page_size=options["page_size"],
            )

        return await self._run("list", actor, body)

    async def count(self, actor: Optional[Actor], filters: Optional[Mapping[str, Any]] = None) -> ServiceOutput:
        async def body(actor: Actor):
            where, options = self._split_search(filters, None)
            self._authorize(actor, Operation.COUNT)
            where = await self._before_list(actor, where)
            return await self.repository.count(
                filters=where,
                q=options.get("q"),
                scope=visibility_scope(actor, self.policy, self.model),
            )

        return await self._run("count", actor, body)

    async def update_visibility(self, actor: Optional[Actor], entity_id: Any, visibility: Any) -> ServiceOutput:
        async def body(actor: Actor):
            if not self.policy.has_visibility:
                raise ServiceError(
                    ServiceErrorCode.VALIDATION_ERROR,
                    f"visibility: {self.entity_name} records have no visibility",
                )
            entity = await self._get_existing(entity_id)
            payload = validate_input(VisibilityUpdate, {"visibility": visibility})
            self._authorize(actor, Operation.UPDATE_VISIBILITY, entity)
            updated = await self.repository.update(
                entity, {"visibility": payload.visibility, "updated_by_id": actor.id}
            )
            return self._to_read(updated)

        return await self._run("updateVisibility", actor, body)


class SluggedCrudService(BaseCrudService):
    """Adds slug generation on create and lookup by slug."""

    slug_source: str = "name"
    lookup_fields: Sequence[str] = ("slug",)

    async def _unique_slug(self, base: str, exclude_id: Optional[uuid.UUID] = None) -> str:
        candidate, suffix = base, 2
        while True:
            existing = await self.repository.find_one({"slug": candidate}, include_deleted=True)
            if existing is None or existing.id == exclude_id:
                return candidate
            candidate = f"{base}-{suffix}"
            suffix += 1

    async def _before_create(self, actor: Actor, values: Dict[str, Any]) -> Dict[str, Any]:
        values = await super()._before_create(actor, values)
        requested = values.get("slug")
        if requested:
            if await self.repository.find_one({"slug": requested}, include_deleted=True) is not None:
                raise ServiceError(ServiceErrorCode.VALIDATION_ERROR, f"slug: '{requested}' is already in use")
        else:
            values["slug"] = await self._unique_slug(slugify(values[self.slug_source]))
        return values

    async def _before_update(self, actor: Actor, entity: Any, values: Dict[str, Any]) -> Dict[str, Any]:
        values = await super()._before_update(actor, entity, values)
        requested = values.get("slug")
        if requested and requested != entity.slug:
            existing = await self.repository.find_one({"slug": requested}, include_deleted=True)
            if existing is not None and existing.id != entity.id:
                raise ServiceError(ServiceErrorCode.VALIDATION_ERROR, f"slug: '{requested}' is already in use")
        return values

    async def get_by_slug(self, actor: Optional[Actor], slug: str) -> ServiceOutput:
        return await self.get_by_field(actor, "slug", slug)
