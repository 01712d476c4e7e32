"""
Hospeda Backend — User Service
===============================

What:  CRUD over platform users.
How:   Emails are unique across live and deleted users. `role` and
       `permissions` can only be written by actors holding USER_UPDATE_ROLES
       (or an elevated role), so a user editing their own profile cannot
       promote themselves.
"""

from typing import Any, Dict

from hospeda.enums import PermissionEnum
from hospeda.exceptions import ServiceError, ServiceErrorCode
from hospeda.permissions import Actor
from hospeda.permissions.policies import USER_POLICY
from hospeda.repositories.entities import UserRepository
from hospeda.schemas.user import UserCreate, UserRead, UserSearch, UserUpdate
from hospeda.services.base import BaseCrudService


class UserService(BaseCrudService):
    entity_name = "user"
    repository_cls = UserRepository
    policy = USER_POLICY
    create_schema = UserCreate
    update_schema = UserUpdate
    search_schema = UserSearch
    read_schema = UserRead
    restricted_fields = {
        "role": PermissionEnum.USER_UPDATE_ROLES,
        "permissions": PermissionEnum.USER_UPDATE_ROLES,
    }
    lookup_fields = ("email",)

    async def _ensure_email_free(self, email: str, current_id=None) -> None:
        existing = await self.repository.find_one({"email": email}, include_deleted=True)
        if existing is not None and existing.id != current_id:
            raise ServiceError(ServiceErrorCode.VALIDATION_ERROR, f"email: '{email}' is already registered")

    async def _before_create(self, actor: Actor, values: Dict[str, Any]) -> Dict[str, Any]:
        await self._ensure_email_free(values["email"])
        return values

    async def _before_update(self, actor: Actor, entity: Any, values: Dict[str, Any]) -> Dict[str, Any]:
        if "email" in values and values["email"] != entity.email:
            await self._ensure_email_free(values["email"], entity.id)
        return values

    async def get_by_field(self, actor, field: str, value):
        if field == "email" and isinstance(value, str):
            value = value.strip().lower()
        return await super().get_by_field(actor, field, value)
