"""Destination schemas: create / update / search / read."""

from typing import Annotated, Optional

from pydantic import Field

from hospeda.schemas.common import (
    ContentStateFilters,
    ContentStateInput,
    ContentStateRead,
    SearchParams,
    Slug,
    Summary,
)

DestinationName = Annotated[str, Field(min_length=3, max_length=100)]
Description = Annotated[str, Field(min_length=30, max_length=2000)]
PlaceName = Annotated[str, Field(min_length=2, max_length=100)]


class DestinationCreate(ContentStateInput):
    name: DestinationName
    slug: Optional[Slug] = None
    summary: Summary
    description: Description
    city: PlaceName
    state: PlaceName
    country: PlaceName
    is_featured: Optional[bool] = None


class DestinationUpdate(ContentStateInput):
    name: Optional[DestinationName] = None
    slug: Optional[Slug] = None
    summary: Optional[Summary] = None
    description: Optional[Description] = None
    city: Optional[PlaceName] = None
    state: Optional[PlaceName] = None
    country: Optional[PlaceName] = None
    is_featured: Optional[bool] = None


class DestinationSearch(ContentStateFilters, SearchParams):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    is_featured: Optional[bool] = None


class DestinationRead(ContentStateRead):
    name: str
    slug: str
    summary: str
    description: str
    city: str
    state: str
    country: str
    is_featured: bool
