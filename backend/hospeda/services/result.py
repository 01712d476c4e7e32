"""
Hospeda Backend — Service Result Types
=======================================

What:  `ServiceOutput` (exactly one of data / error) and `Page` (one page of
       a listing plus its totals).
Why:   Services report expected failures as values. The transport decides
       what HTTP status an error becomes; services never raise to it.
"""

import math
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from hospeda.exceptions import ServiceError, ServiceErrorCode

T = TypeVar("T")


@dataclass(frozen=True)
class ErrorDetail:
    code: ServiceErrorCode
    message: str

    def to_exception(self) -> ServiceError:
        return ServiceError(self.code, self.message)


@dataclass(frozen=True)
class ServiceOutput(Generic[T]):
    data: Optional[T] = None
    error: Optional[ErrorDetail] = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.error is None):
            raise ValueError("ServiceOutput needs exactly one of data or error")

    @classmethod
    def ok(cls, data: T) -> "ServiceOutput[T]":
        return cls(data=data)

    @classmethod
    def fail(cls, code: ServiceErrorCode, message: str) -> "ServiceOutput[T]":
        return cls(error=ErrorDetail(ServiceErrorCode(code), message))

    @property
    def is_ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0
