"""
Hospeda Backend — Permissions
==============================

Actor model, per-entity policies and the evaluator that services consult
before touching persistence.
"""

from hospeda.permissions.actor import GUEST_ACTOR, Actor
from hospeda.permissions.evaluator import (
    Operation,
    PermissionReason,
    PermissionResult,
    can_perform,
    describe_denial,
    has_permission,
    visibility_scope,
)
from hospeda.permissions.policies import EntityPolicy

__all__ = [
    "Actor",
    "EntityPolicy",
    "GUEST_ACTOR",
    "Operation",
    "PermissionReason",
    "PermissionResult",
    "can_perform",
    "describe_denial",
    "has_permission",
    "visibility_scope",
]
