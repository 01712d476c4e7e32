"""
Event schemas: create / update / search / read.

Date and price ranges are declared once in `EventRules` and shared by the
create and update variants.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Annotated, ClassVar, Dict, Optional, Tuple

from pydantic import Field, ValidationInfo, field_validator

from hospeda.enums import EventCategoryEnum
from hospeda.schemas.common import (
    ContentStateFilters,
    ContentStateInput,
    ContentStateRead,
    SearchParams,
    Slug,
    Summary,
    ensure_not_before,
    ensure_range_ordered,
)

EventName = Annotated[str, Field(min_length=3, max_length=100)]
Description = Annotated[str, Field(min_length=1, max_length=5000)]
Location = Annotated[str, Field(min_length=2, max_length=200)]
Price = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


class EventRules(ContentStateInput):
    @field_validator("end_date", check_fields=False)
    @classmethod
    def end_not_before_start(cls, v: Optional[date], info: ValidationInfo) -> Optional[date]:
        return ensure_not_before(v, info, "start_date")

    @field_validator("price_to", check_fields=False)
    @classmethod
    def price_range_ordered(cls, v: Optional[Decimal], info: ValidationInfo) -> Optional[Decimal]:
        return ensure_not_before(v, info, "price_from")


class EventCreate(EventRules):
    name: EventName
    slug: Optional[Slug] = None
    summary: Summary
    description: Optional[Description] = None
    category: EventCategoryEnum
    author_id: Optional[uuid.UUID] = None
    destination_id: Optional[uuid.UUID] = None
    start_date: date
    end_date: Optional[date] = None
    location: Optional[Location] = None
    is_free: Optional[bool] = None
    price_from: Optional[Price] = None
    price_to: Optional[Price] = None
    is_featured: Optional[bool] = None


class EventUpdate(EventRules):
    name: Optional[EventName] = None
    slug: Optional[Slug] = None
    summary: Optional[Summary] = None
    description: Optional[Description] = None
    category: Optional[EventCategoryEnum] = None
    author_id: Optional[uuid.UUID] = None
    destination_id: Optional[uuid.UUID] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Optional[Location] = None
    is_free: Optional[bool] = None
    price_from: Optional[Price] = None
    price_to: Optional[Price] = None
    is_featured: Optional[bool] = None


class EventSearch(ContentStateFilters, SearchParams):
    range_filters: ClassVar[Dict[str, Tuple[str, str]]] = {
        **SearchParams.range_filters,
        "start_date_after": ("start_date", "lower"),
        "start_date_before": ("start_date", "upper"),
        "min_price": ("price_from", "lower"),
        "max_price": ("price_from", "upper"),
    }

    category: Optional[EventCategoryEnum] = None
    author_id: Optional[uuid.UUID] = None
    destination_id: Optional[uuid.UUID] = None
    is_free: Optional[bool] = None
    is_featured: Optional[bool] = None
    start_date_after: Optional[date] = Field(default=None, alias="startDateAfter")
    start_date_before: Optional[date] = Field(default=None, alias="startDateBefore")
    min_price: Optional[Price] = Field(default=None, alias="minPrice")
    max_price: Optional[Price] = Field(default=None, alias="maxPrice")

    @field_validator("start_date_before", "max_price")
    @classmethod
    def bounds_ordered(cls, v, info: ValidationInfo):
        return ensure_range_ordered(cls, v, info)


class EventRead(ContentStateRead):
    name: str
    slug: str
    summary: str
    description: Optional[str] = None
    category: str
    author_id: uuid.UUID
    destination_id: Optional[uuid.UUID] = None
    start_date: date
    end_date: Optional[date] = None
    location: Optional[str] = None
    is_free: bool
    price_from: Optional[Decimal] = None
    price_to: Optional[Decimal] = None
    is_featured: bool
