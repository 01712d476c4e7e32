"""Tag schemas, plus the entity-tag association and popular-tag payloads."""

import uuid
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from hospeda.enums import EntityTypeEnum, LifecycleStatusEnum, TagColorEnum
from hospeda.schemas.common import SLUG_PATTERN, HospedaSchema, LifecycleInput, LifecycleRead, SearchParams

TagName = Annotated[str, Field(min_length=2, max_length=50)]
# tags.slug is VARCHAR(60)
TagSlug = Annotated[str, Field(min_length=1, max_length=60, pattern=SLUG_PATTERN)]
TagIcon = Annotated[str, Field(min_length=1, max_length=100)]
TagNotes = Annotated[str, Field(max_length=300)]


class TagCreate(LifecycleInput):
    name: TagName
    slug: Optional[TagSlug] = None
    color: Optional[TagColorEnum] = None
    icon: Optional[TagIcon] = None
    notes: Optional[TagNotes] = None


class TagUpdate(LifecycleInput):
    name: Optional[TagName] = None
    slug: Optional[TagSlug] = None
    color: Optional[TagColorEnum] = None
    icon: Optional[TagIcon] = None
    notes: Optional[TagNotes] = None


class TagSearch(SearchParams):
    color: Optional[TagColorEnum] = None
    lifecycle_state: Optional[LifecycleStatusEnum] = None


class TagRead(LifecycleRead):
    name: str
    slug: str
    color: str
    icon: Optional[str] = None
    notes: Optional[str] = None


class EntityTagInput(HospedaSchema):
    tag_id: uuid.UUID
    entity_type: EntityTypeEnum
    entity_id: uuid.UUID


class EntityRef(HospedaSchema):
    entity_type: EntityTypeEnum
    entity_id: uuid.UUID


class PopularTagsQuery(HospedaSchema):
    limit: int = Field(default=10, ge=1, le=50)


class TagUsage(BaseModel):
    tag: TagRead
    usage_count: int
