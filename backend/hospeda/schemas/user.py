"""User schemas: create / update / search / read."""

from typing import Annotated, List, Optional

from pydantic import Field, field_validator

from hospeda.enums import LifecycleStatusEnum, PermissionEnum, RoleEnum
from hospeda.schemas.common import Email, LifecycleInput, LifecycleRead, SearchParams

DisplayName = Annotated[str, Field(min_length=2, max_length=100)]
PersonName = Annotated[str, Field(min_length=1, max_length=100)]


class UserRules(LifecycleInput):
    @field_validator("email", check_fields=False)
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    @field_validator("role", check_fields=False)
    @classmethod
    def reject_guest_role(cls, v: Optional[str]) -> Optional[str]:
        if v == RoleEnum.GUEST:
            raise ValueError("GUEST is reserved for anonymous actors")
        return v


class UserCreate(UserRules):
    email: Email
    display_name: DisplayName
    first_name: Optional[PersonName] = None
    last_name: Optional[PersonName] = None
    role: Optional[RoleEnum] = None
    permissions: Optional[List[PermissionEnum]] = None


class UserUpdate(UserRules):
    email: Optional[Email] = None
    display_name: Optional[DisplayName] = None
    first_name: Optional[PersonName] = None
    last_name: Optional[PersonName] = None
    role: Optional[RoleEnum] = None
    permissions: Optional[List[PermissionEnum]] = None


class UserSearch(SearchParams):
    email: Optional[str] = None
    role: Optional[RoleEnum] = None
    lifecycle_state: Optional[LifecycleStatusEnum] = None


class UserRead(LifecycleRead):
    email: str
    display_name: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    permissions: List[str] = []
