"""
Hospeda Backend — Actor
========================

What:  The identity performing an operation: id, role and explicit permissions.
Who:   Built by the transport layer (ActorMiddleware) and passed explicitly
       into every service call. Nothing stores a "current actor" globally.
"""

import uuid
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from hospeda.enums import PermissionEnum, RoleEnum

ELEVATED_ROLES = frozenset({RoleEnum.SUPER_ADMIN, RoleEnum.ADMIN})


@dataclass(frozen=True)
class Actor:
    id: Optional[uuid.UUID]
    role: RoleEnum
    permissions: FrozenSet[PermissionEnum] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        actor_id: Optional[uuid.UUID],
        role: RoleEnum,
        permissions: Iterable[PermissionEnum] = (),
    ) -> "Actor":
        return cls(id=actor_id, role=RoleEnum(role), permissions=frozenset(PermissionEnum(p) for p in permissions))

    @property
    def is_guest(self) -> bool:
        return self.id is None or self.role == RoleEnum.GUEST

    @property
    def is_elevated(self) -> bool:
        return self.role in ELEVATED_ROLES

    @property
    def is_super_admin(self) -> bool:
        return self.role == RoleEnum.SUPER_ADMIN

    def has(self, permission: Optional[PermissionEnum]) -> bool:
        return permission is not None and permission in self.permissions


# Anonymous caller: may read public content and nothing else
GUEST_ACTOR = Actor(id=None, role=RoleEnum.GUEST)
