"""
Hospeda Backend — Exception Hierarchy and Error Codes
======================================================

What:  Application-specific exceptions and the closed set of service error codes.
Why:   Services detect validation, permission and lookup failures early and
       raise a ServiceError carrying one of five codes; the service boundary
       turns it into a ServiceOutput and the transport maps the code to a
       fixed HTTP status.
How:   Each exception carries a message and optional context dict. The
       context is logged server-side and never returned to clients.

Exception Hierarchy:
    HospedaError (base)
    ├── ServiceError             → status from ServiceErrorCode
    ├── UnknownVisibilityError   → INTERNAL_ERROR (data-quality problem, fail fast)
    ├── DatabaseError            → INTERNAL_ERROR (wraps SQLAlchemy failures)
    └── RateLimitExceededError   → 429 (transport only)

Error Code Table:
    VALIDATION_ERROR → 400    input failed schema constraints
    UNAUTHORIZED     → 401    no actor present
    FORBIDDEN        → 403    actor lacks permission
    NOT_FOUND        → 404    referenced entity absent
    INTERNAL_ERROR   → 500    persistence failure, hook failure, anything unmapped
"""

from enum import Enum
from typing import Any, Dict, Optional


class ServiceErrorCode(str, Enum):
    """Closed set of error codes a service operation can report."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ServiceErrorCode.VALIDATION_ERROR: 400,
    ServiceErrorCode.UNAUTHORIZED: 401,
    ServiceErrorCode.FORBIDDEN: 403,
    ServiceErrorCode.NOT_FOUND: 404,
    ServiceErrorCode.INTERNAL_ERROR: 500,
}


class HospedaError(Exception):
    """
    Base exception for all Hospeda application errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ServiceError(HospedaError):
    """
    A recoverable, expected failure of a service operation.

    Raised inside service bodies (validation, permission, lookup) and by the
    transport layer when it needs to answer with one of the five codes.

    Example response body:
        {
            "success": false,
            "error": {"code": "NOT_FOUND", "message": "Destination with ID '…' was not found"}
        }
    """

    def __init__(
        self,
        code: ServiceErrorCode,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.code = ServiceErrorCode(code)

    @classmethod
    def not_found(cls, resource: str, resource_id: Any) -> "ServiceError":
        return cls(
            ServiceErrorCode.NOT_FOUND,
            f"{resource} with ID '{resource_id}' was not found",
            context={"resource": resource, "resource_id": str(resource_id)},
        )

    def __repr__(self) -> str:
        return f"ServiceError(code={self.code.value!r}, message={self.message!r})"


class UnknownVisibilityError(HospedaError):
    """
    Raised by the permission evaluator when a record carries a visibility
    value outside PUBLIC / PRIVATE / RESTRICTED.

    Not a denial: the record itself is malformed, so the operation fails
    loudly and the service reports INTERNAL_ERROR.
    """

    def __init__(self, entity_name: str, visibility: Any):
        super().__init__(
            message=f"Unknown {entity_name} visibility: {visibility!r}",
            context={"entity": entity_name, "visibility": visibility},
        )


class DatabaseError(HospedaError):
    """
    Raised when a repository operation fails inside SQLAlchemy.

    The message returned to the client is always generic; the original
    exception is chained and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(HospedaError):
    """
    Raised when a client exceeds the per-IP request quota.

    Transport-only: services never raise it. Answered with 429 and a
    Retry-After header.
    """

    def __init__(self, retry_after: int):
        super().__init__(
            message=f"Too many requests. Please wait {retry_after} seconds before retrying.",
            context={"retry_after": retry_after},
        )
        self.retry_after = retry_after
