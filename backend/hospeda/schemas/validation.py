"""
Hospeda Backend — Input Validation Helper
==========================================

What:  `validate_input(schema, data)` turns unknown input into a typed schema
       instance or raises ServiceError(VALIDATION_ERROR).
How:   Pydantic collects every violation in one pass; they are joined into a
       single message (`"name: String should have at least 3 characters; …"`)
       and the structured list is kept in the error context.
"""

from typing import Any, Dict, List, Mapping, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from hospeda.exceptions import ServiceError, ServiceErrorCode

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _field_path(location) -> str:
    return ".".join(str(part) for part in location) or "input"


def describe_errors(errors: Sequence[Mapping[str, Any]]) -> List[Dict[str, str]]:
    """Flattens Pydantic (or FastAPI request) error dicts to field/message pairs."""
    return [
        {"field": _field_path(error["loc"]), "message": error["msg"]}
        for error in errors
    ]


def describe_violations(exc: ValidationError) -> List[Dict[str, str]]:
    return describe_errors(exc.errors())


def join_violations(violations: List[Dict[str, str]]) -> str:
    return "; ".join(f"{v['field']}: {v['message']}" for v in violations)


def validate_input(schema: Type[SchemaT], data: Any) -> SchemaT:
    if data is None:
        data = {}
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        violations = describe_violations(exc)
        raise ServiceError(
            ServiceErrorCode.VALIDATION_ERROR,
            join_violations(violations),
            context={"schema": schema.__name__, "violations": violations},
        ) from exc
