"""Post schemas: create / update / search / read."""

import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import Field, ValidationInfo, field_validator

from hospeda.enums import PostCategoryEnum
from hospeda.schemas.common import (
    ContentStateFilters,
    ContentStateInput,
    ContentStateRead,
    SearchParams,
    Slug,
    Summary,
    ensure_not_before,
)

PostTitle = Annotated[str, Field(min_length=3, max_length=150)]
PostContent = Annotated[str, Field(min_length=100, max_length=50000)]


class PostRules(ContentStateInput):
    @field_validator("expires_at", check_fields=False)
    @classmethod
    def expires_after_publication(cls, v: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
        return ensure_not_before(v, info, "published_at", strict=True)


class PostCreate(PostRules):
    title: PostTitle
    slug: Optional[Slug] = None
    summary: Summary
    content: PostContent
    category: PostCategoryEnum
    author_id: Optional[uuid.UUID] = None
    published_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_news: Optional[bool] = None
    is_featured: Optional[bool] = None


class PostUpdate(PostRules):
    title: Optional[PostTitle] = None
    slug: Optional[Slug] = None
    summary: Optional[Summary] = None
    content: Optional[PostContent] = None
    category: Optional[PostCategoryEnum] = None
    author_id: Optional[uuid.UUID] = None
    published_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_news: Optional[bool] = None
    is_featured: Optional[bool] = None


class PostSearch(ContentStateFilters, SearchParams):
    category: Optional[PostCategoryEnum] = None
    author_id: Optional[uuid.UUID] = None
    is_news: Optional[bool] = None
    is_featured: Optional[bool] = None


class PostRead(ContentStateRead):
    title: str
    slug: str
    summary: str
    content: str
    category: str
    author_id: uuid.UUID
    published_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_news: bool
    is_featured: bool
