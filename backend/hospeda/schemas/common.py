"""
Hospeda Backend — Shared Pydantic Schemas
==========================================

What:  Base configuration, reusable field groups, pagination/search input,
       and the HTTP envelope models used in the OpenAPI docs.
Why:   Every entity composes its create / update / search / read schemas
       from these pieces through plain class inheritance, so one flattened
       model is produced per variant.

Input schemas ignore unknown keys. A client that sends `id`, `created_at`
or any other server-managed column simply has it dropped before the
service sees the payload.
"""

import uuid
from datetime import datetime
from typing import Annotated, Any, ClassVar, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from hospeda.config import settings
from hospeda.enums import LifecycleStatusEnum, ModerationStatusEnum, VisibilityEnum


class HospedaSchema(BaseModel):
    """Base for every input schema."""

    model_config = ConfigDict(
        extra="ignore",
        use_enum_values=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )


# ── Reusable constrained types ────────────────────────────────────────────
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
Slug = Annotated[str, Field(min_length=1, max_length=120, pattern=SLUG_PATTERN)]
Summary = Annotated[str, Field(min_length=10, max_length=300)]
CurrencyCode = Annotated[str, Field(min_length=3, max_length=3, pattern=r"^[A-Z]{3}$")]
Email = Annotated[str, Field(min_length=5, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")]


def ensure_not_before(
    value: Any, info: ValidationInfo, other: str, strict: bool = False, label: Optional[str] = None
) -> Any:
    """
    Cross-field rule for a later bound (end date, upper price) declared after
    its lower bound. Skipped when either side is absent, so partial updates
    only check the pair when both are sent.
    """
    lower = info.data.get(other)
    if value is None or lower is None:
        return value
    try:
        out_of_order = value < lower or (strict and value == lower)
    except TypeError:
        raise ValueError(f"cannot be compared with {label or other}")
    if out_of_order:
        raise ValueError(f"must be {'after' if strict else 'on or after'} {label or other}")
    return value


# ══════════════════════════════════════════════════════════════════════════
# Field groups
# ══════════════════════════════════════════════════════════════════════════

class LifecycleInput(HospedaSchema):
    lifecycle_state: Optional[LifecycleStatusEnum] = None


class ContentStateInput(LifecycleInput):
    """Lifecycle, visibility and moderation for publishable content."""

    visibility: Optional[VisibilityEnum] = None
    moderation_state: Optional[ModerationStatusEnum] = None


class ContentStateFilters(HospedaSchema):
    lifecycle_state: Optional[LifecycleStatusEnum] = None
    visibility: Optional[VisibilityEnum] = None
    moderation_state: Optional[ModerationStatusEnum] = None


class SearchParams(HospedaSchema):
    """
    Pagination, sorting and free-text query shared by every search schema.

    `page_size` is also accepted as `pageSize`, the name used on the wire.

    `range_filters` maps each bound field to the column it limits and the
    side of the inclusive range it sets. Services turn those fields into
    `Range` filters instead of equality matches.
    """

    range_filters: ClassVar[Dict[str, Tuple[str, str]]] = {
        "created_after": ("created_at", "lower"),
        "created_before": ("created_at", "upper"),
    }

    page: int = Field(default=1, ge=1)
    page_size: int = Field(
        default=settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        alias="pageSize",
    )
    q: Optional[str] = Field(default=None, max_length=200)
    sort_by: Optional[str] = Field(default=None, alias="sortBy", max_length=64)
    sort_order: Literal["asc", "desc"] = Field(default="desc", alias="sortOrder")
    created_after: Optional[datetime] = Field(default=None, alias="createdAfter")
    created_before: Optional[datetime] = Field(default=None, alias="createdBefore")

    @field_validator("created_before")
    @classmethod
    def created_range_ordered(cls, v: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        return ensure_range_ordered(cls, v, info)


def ensure_range_ordered(schema: Any, value: Any, info: ValidationInfo) -> Any:
    """Upper search bound must not fall below the lower bound on the same column."""
    column, _ = schema.range_filters[info.field_name]
    lower = next(
        name for name, (target, side) in schema.range_filters.items()
        if target == column and side == "lower"
    )
    return ensure_not_before(value, info, lower, label=schema.model_fields[lower].alias or lower)


PAGINATION_FIELDS = frozenset({"page", "page_size", "q", "sort_by", "sort_order"})


class VisibilityUpdate(HospedaSchema):
    visibility: VisibilityEnum


# ══════════════════════════════════════════════════════════════════════════
# Read models
# ══════════════════════════════════════════════════════════════════════════

class AuditRead(BaseModel):
    """Server-assigned columns present on every entity."""

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    created_by_id: Optional[uuid.UUID] = None
    updated_by_id: Optional[uuid.UUID] = None
    deleted_at: Optional[datetime] = None
    deleted_by_id: Optional[uuid.UUID] = None

    model_config = {"from_attributes": True}


class LifecycleRead(AuditRead):
    lifecycle_state: str


class ContentStateRead(LifecycleRead):
    visibility: str
    moderation_state: str


# ══════════════════════════════════════════════════════════════════════════
# HTTP envelope (documentation models)
# ══════════════════════════════════════════════════════════════════════════

class PaginationMeta(BaseModel):
    page: int
    page_size: int = Field(serialization_alias="pageSize")
    total: int
    total_pages: int = Field(serialization_alias="totalPages")


class ResponseMeta(BaseModel):
    timestamp: datetime
    request_id: str = Field(serialization_alias="requestId")
    pagination: Optional[PaginationMeta] = None


class SuccessEnvelope(BaseModel):
    success: Literal[True] = True
    data: Any
    metadata: Optional[ResponseMeta] = None


class ErrorBody(BaseModel):
    code: str = Field(description="VALIDATION_ERROR, UNAUTHORIZED, FORBIDDEN, NOT_FOUND or INTERNAL_ERROR")
    message: str


class ErrorEnvelope(BaseModel):
    success: Literal[False] = False
    error: ErrorBody
    metadata: Optional[ResponseMeta] = None


ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"description": "Validation error", "model": ErrorEnvelope},
    401: {"description": "No authenticated actor", "model": ErrorEnvelope},
    403: {"description": "Actor lacks permission", "model": ErrorEnvelope},
    404: {"description": "Entity not found", "model": ErrorEnvelope},
    500: {"description": "Unexpected failure", "model": ErrorEnvelope},
}


class HealthResponse(BaseModel):
    """Returned by GET /health for Docker health checks and load balancers."""

    status: str = Field(description="Overall status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database status: connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since the service started")
