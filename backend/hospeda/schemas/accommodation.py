"""Accommodation schemas: create / update / search / read."""

import uuid
from decimal import Decimal
from typing import Annotated, ClassVar, Dict, Optional, Tuple

from pydantic import Field, ValidationInfo, field_validator

from hospeda.enums import AccommodationTypeEnum
from hospeda.schemas.common import (
    ContentStateFilters,
    ContentStateInput,
    ContentStateRead,
    CurrencyCode,
    SearchParams,
    Slug,
    Summary,
    ensure_range_ordered,
)

AccommodationName = Annotated[str, Field(min_length=3, max_length=100)]
Description = Annotated[str, Field(min_length=30, max_length=2000)]
Price = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]
GuestCount = Annotated[int, Field(ge=1, le=100)]
BedroomCount = Annotated[int, Field(ge=0, le=50)]


class AccommodationCreate(ContentStateInput):
    name: AccommodationName
    slug: Optional[Slug] = None
    summary: Summary
    description: Description
    type: AccommodationTypeEnum
    destination_id: uuid.UUID
    owner_id: Optional[uuid.UUID] = None
    price: Optional[Price] = None
    currency: Optional[CurrencyCode] = None
    max_guests: Optional[GuestCount] = None
    bedrooms: Optional[BedroomCount] = None
    is_featured: Optional[bool] = None


class AccommodationUpdate(ContentStateInput):
    name: Optional[AccommodationName] = None
    slug: Optional[Slug] = None
    summary: Optional[Summary] = None
    description: Optional[Description] = None
    type: Optional[AccommodationTypeEnum] = None
    destination_id: Optional[uuid.UUID] = None
    owner_id: Optional[uuid.UUID] = None
    price: Optional[Price] = None
    currency: Optional[CurrencyCode] = None
    max_guests: Optional[GuestCount] = None
    bedrooms: Optional[BedroomCount] = None
    is_featured: Optional[bool] = None


class AccommodationSearch(ContentStateFilters, SearchParams):
    range_filters: ClassVar[Dict[str, Tuple[str, str]]] = {
        **SearchParams.range_filters,
        "min_price": ("price", "lower"),
        "max_price": ("price", "upper"),
        "min_guests": ("max_guests", "lower"),
        "max_guests": ("max_guests", "upper"),
        "min_bedrooms": ("bedrooms", "lower"),
        "max_bedrooms": ("bedrooms", "upper"),
    }

    type: Optional[AccommodationTypeEnum] = None
    destination_id: Optional[uuid.UUID] = None
    owner_id: Optional[uuid.UUID] = None
    is_featured: Optional[bool] = None
    min_price: Optional[Price] = Field(default=None, alias="minPrice")
    max_price: Optional[Price] = Field(default=None, alias="maxPrice")
    min_guests: Optional[GuestCount] = Field(default=None, alias="minGuests")
    max_guests: Optional[GuestCount] = Field(default=None, alias="maxGuests")
    min_bedrooms: Optional[BedroomCount] = Field(default=None, alias="minBedrooms")
    max_bedrooms: Optional[BedroomCount] = Field(default=None, alias="maxBedrooms")

    @field_validator("max_price", "max_guests", "max_bedrooms")
    @classmethod
    def bounds_ordered(cls, v, info: ValidationInfo):
        return ensure_range_ordered(cls, v, info)


class AccommodationRead(ContentStateRead):
    name: str
    slug: str
    summary: str
    description: str
    type: str
    destination_id: uuid.UUID
    owner_id: uuid.UUID
    price: Optional[Decimal] = None
    currency: str
    max_guests: int
    bedrooms: int
    is_featured: bool
