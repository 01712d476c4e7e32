"""
Hospeda Backend — Permission Evaluator
=======================================

What:  `can_perform(actor, operation, policy, entity)` decides whether an
       actor may perform an operation on an entity instance (or on the
       entity class, for create / list / count).
       `visibility_scope(actor, policy, model)` expresses the same read rules
       as a SQL predicate so listings are filtered in the query itself.
Who:   Called by BaseCrudService before any persistence mutation.

Rules, in order:
    1. No actor                       → denied (UNAUTHENTICATED)
    2. SUPER_ADMIN                    → allowed for everything
    3. ADMIN                          → allowed for everything
    4. hard delete                    → the entity's hard-delete permission
    5. create                         → the entity's create permission
    6. list / count                   → allowed unless the policy names a listing permission
    7. update / delete / restore      → `*_any` permission, or `*_own` permission + ownership
    8. view                           → view_all; tombstoned rows denied; non-ACTIVE or
                                        non-APPROVED rows need ownership or view_draft;
                                        PUBLIC readable by anyone; PRIVATE / RESTRICTED
                                        need ownership or view_private

Unknown visibility values raise UnknownVisibilityError instead of quietly
denying or allowing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from sqlalchemy import ColumnElement, and_, false, or_

from hospeda.enums import LifecycleStatusEnum, ModerationStatusEnum, PermissionEnum, VisibilityEnum
from hospeda.exceptions import UnknownVisibilityError
from hospeda.permissions.actor import Actor
from hospeda.permissions.policies import EntityPolicy


class Operation(str, Enum):
    CREATE = "create"
    VIEW = "view"
    UPDATE = "update"
    SOFT_DELETE = "softDelete"
    RESTORE = "restore"
    HARD_DELETE = "hardDelete"
    LIST = "list"
    COUNT = "count"
    UPDATE_VISIBILITY = "updateVisibility"


class PermissionReason(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    PERMISSION = "PERMISSION"
    OWNER = "OWNER"
    PUBLIC_ACCESS = "PUBLIC_ACCESS"
    MISSING_PERMISSION = "MISSING_PERMISSION"
    NOT_OWNER = "NOT_OWNER"
    DELETED = "DELETED"
    DRAFT = "DRAFT"
    ARCHIVED = "ARCHIVED"
    PENDING = "PENDING"
    REJECTED = "REJECTED"
    PRIVATE = "PRIVATE"


@dataclass(frozen=True)
class PermissionResult:
    allowed: bool
    reason: PermissionReason


def _allow(reason: PermissionReason) -> PermissionResult:
    return PermissionResult(True, reason)


def _deny(reason: PermissionReason) -> PermissionResult:
    return PermissionResult(False, reason)


def has_permission(actor: Optional[Actor], permission: Optional[PermissionEnum]) -> bool:
    return actor is not None and actor.has(permission)


def is_owner(actor: Actor, policy: EntityPolicy, entity: Any) -> bool:
    if policy.owner_field is None or actor.is_guest:
        return False
    owner_id = getattr(entity, policy.owner_field, None)
    return owner_id is not None and str(owner_id) == str(actor.id)


def entity_visibility(policy: EntityPolicy, entity: Any) -> VisibilityEnum:
    value = getattr(entity, "visibility", None)
    try:
        return VisibilityEnum(value)
    except ValueError:
        raise UnknownVisibilityError(policy.entity_name, value) from None


# ══════════════════════════════════════════════════════════════════════════
# Instance-level evaluation
# ══════════════════════════════════════════════════════════════════════════

def _owned_or_any(
    actor: Actor,
    policy: EntityPolicy,
    entity: Any,
    any_permission: Optional[PermissionEnum],
    own_permission: Optional[PermissionEnum],
) -> PermissionResult:
    if actor.has(any_permission):
        return _allow(PermissionReason.PERMISSION)
    if actor.has(own_permission):
        if is_owner(actor, policy, entity):
            return _allow(PermissionReason.OWNER)
        return _deny(PermissionReason.NOT_OWNER)
    return _deny(PermissionReason.MISSING_PERMISSION)


def _evaluate_view(actor: Actor, policy: EntityPolicy, entity: Any) -> PermissionResult:
    # Parsed first so malformed rows fail no matter who is asking
    visibility = entity_visibility(policy, entity) if policy.has_visibility else None

    if actor.has(policy.view_all):
        return _allow(PermissionReason.PERMISSION)
    if getattr(entity, "deleted_at", None) is not None:
        return _deny(PermissionReason.DELETED)

    owner = is_owner(actor, policy, entity)
    can_see_unpublished = owner or actor.has(policy.view_draft)

    if policy.has_lifecycle:
        lifecycle = getattr(entity, "lifecycle_state", None)
        if lifecycle != LifecycleStatusEnum.ACTIVE:
            if can_see_unpublished:
                return _allow(PermissionReason.OWNER if owner else PermissionReason.PERMISSION)
            if lifecycle == LifecycleStatusEnum.ARCHIVED:
                return _deny(PermissionReason.ARCHIVED)
            return _deny(PermissionReason.DRAFT)

    if policy.has_moderation:
        moderation = getattr(entity, "moderation_state", None)
        if moderation != ModerationStatusEnum.APPROVED:
            if can_see_unpublished:
                return _allow(PermissionReason.OWNER if owner else PermissionReason.PERMISSION)
            if moderation == ModerationStatusEnum.REJECTED:
                return _deny(PermissionReason.REJECTED)
            return _deny(PermissionReason.PENDING)

    if visibility is not None:
        if visibility == VisibilityEnum.PUBLIC:
            return _allow(PermissionReason.PUBLIC_ACCESS)
        if owner:
            return _allow(PermissionReason.OWNER)
        if actor.has(policy.view_private):
            return _allow(PermissionReason.PERMISSION)
        return _deny(PermissionReason.PRIVATE)

    if policy.view is None:
        return _allow(PermissionReason.PUBLIC_ACCESS)
    if owner:
        return _allow(PermissionReason.OWNER)
    if actor.has(policy.view):
        return _allow(PermissionReason.PERMISSION)
    return _deny(PermissionReason.MISSING_PERMISSION)


def can_perform(
    actor: Optional[Actor],
    operation: Operation,
    policy: EntityPolicy,
    entity: Any = None,
) -> PermissionResult:
    """
    Evaluates one operation for one actor.

    `entity` is required for view, update, soft delete, restore, hard delete
    and visibility changes; it is ignored for create, list and count.

    Raises:
        UnknownVisibilityError: the entity carries a visibility outside the enum
    """
    if actor is None:
        return _deny(PermissionReason.UNAUTHENTICATED)
    if actor.is_super_admin:
        return _allow(PermissionReason.SUPER_ADMIN)

    if actor.is_elevated:
        return _allow(PermissionReason.ADMIN)

    operation = Operation(operation)
    if operation == Operation.HARD_DELETE:
        if actor.has(policy.hard_delete):
            return _allow(PermissionReason.PERMISSION)
        return _deny(PermissionReason.MISSING_PERMISSION)

    if operation == Operation.CREATE:
        if actor.has(policy.create):
            return _allow(PermissionReason.PERMISSION)
        return _deny(PermissionReason.MISSING_PERMISSION)

    if operation in (Operation.LIST, Operation.COUNT):
        if policy.listing is None or actor.has(policy.listing):
            return _allow(PermissionReason.PERMISSION)
        return _deny(PermissionReason.MISSING_PERMISSION)

    if entity is None:
        raise ValueError(f"Operation '{operation.value}' needs an entity instance")

    if operation == Operation.VIEW:
        return _evaluate_view(actor, policy, entity)
    if operation == Operation.UPDATE:
        return _owned_or_any(actor, policy, entity, policy.update_any, policy.update_own)
    if operation == Operation.SOFT_DELETE:
        return _owned_or_any(actor, policy, entity, policy.delete_any, policy.delete_own)
    if operation == Operation.RESTORE:
        return _owned_or_any(actor, policy, entity, policy.restore_any, policy.restore_own)
    if operation == Operation.UPDATE_VISIBILITY:
        if not actor.has(policy.visibility_change):
            return _deny(PermissionReason.MISSING_PERMISSION)
        return _owned_or_any(actor, policy, entity, policy.update_any, policy.update_own)

    raise ValueError(f"Unsupported operation: {operation!r}")


_VERBS = {
    Operation.CREATE: "create",
    Operation.VIEW: "view",
    Operation.UPDATE: "update",
    Operation.SOFT_DELETE: "delete",
    Operation.RESTORE: "restore",
    Operation.HARD_DELETE: "permanently delete",
    Operation.LIST: "list",
    Operation.COUNT: "count",
    Operation.UPDATE_VISIBILITY: "change the visibility of",
}


def describe_denial(policy: EntityPolicy, operation: Operation, result: PermissionResult) -> str:
    """Human message for a FORBIDDEN error."""
    target = f"{policy.entity_name} records" if operation in (
        Operation.CREATE, Operation.LIST, Operation.COUNT
    ) else f"this {policy.entity_name}"
    return f"Permission denied: cannot {_VERBS[Operation(operation)]} {target} ({result.reason.value})."


# ══════════════════════════════════════════════════════════════════════════
# Query-level scope
# ══════════════════════════════════════════════════════════════════════════

def visibility_scope(actor: Actor, policy: EntityPolicy, model: Any) -> Optional[ColumnElement[bool]]:
    """
    SQL predicate selecting the rows `actor` may view, or None for no restriction.

    Mirrors `_evaluate_view` for live rows so that page totals count only
    what the actor can actually read. Tombstoned rows are excluded by the
    repository separately.
    """
    if actor.is_elevated or actor.has(policy.view_all):
        return None

    published: List[ColumnElement[bool]] = []
    unpublished: List[ColumnElement[bool]] = []
    if policy.has_lifecycle:
        published.append(model.lifecycle_state == LifecycleStatusEnum.ACTIVE.value)
        unpublished.append(model.lifecycle_state != LifecycleStatusEnum.ACTIVE.value)
    if policy.has_moderation:
        published.append(model.moderation_state == ModerationStatusEnum.APPROVED.value)
        unpublished.append(model.moderation_state != ModerationStatusEnum.APPROVED.value)

    if policy.has_visibility:
        levels = [VisibilityEnum.PUBLIC.value]
        if actor.has(policy.view_private):
            levels += [VisibilityEnum.PRIVATE.value, VisibilityEnum.RESTRICTED.value]
        published.append(model.visibility.in_(levels))
    elif policy.view is not None and not actor.has(policy.view):
        published.append(false())

    if not published:
        return None

    alternatives: List[ColumnElement[bool]] = [and_(*published)]
    if unpublished and actor.has(policy.view_draft):
        alternatives.append(or_(*unpublished))
    if policy.owner_field is not None and not actor.is_guest:
        alternatives.append(getattr(model, policy.owner_field) == actor.id)
    return or_(*alternatives)
