"""
Hospeda Backend — Entity Permission Policies
=============================================

What:  One `EntityPolicy` per entity naming which permission grants each
       operation and which attribute identifies the owner.
How:   A missing permission (None) means only elevated roles can perform
       that operation. `*_own` permissions additionally require ownership.
"""

from dataclasses import dataclass
from typing import Optional

from hospeda.enums import PermissionEnum as P


@dataclass(frozen=True)
class EntityPolicy:
    entity_name: str
    owner_field: Optional[str] = None

    has_lifecycle: bool = True
    has_visibility: bool = False
    has_moderation: bool = False

    create: Optional[P] = None
    update_any: Optional[P] = None
    update_own: Optional[P] = None
    delete_any: Optional[P] = None
    delete_own: Optional[P] = None
    restore_any: Optional[P] = None
    restore_own: Optional[P] = None
    hard_delete: Optional[P] = None

    # Reading records that are not plainly public
    view: Optional[P] = None
    view_private: Optional[P] = None
    view_draft: Optional[P] = None
    view_all: Optional[P] = None

    # When set, listing and counting require this permission
    listing: Optional[P] = None
    visibility_change: Optional[P] = None


USER_POLICY = EntityPolicy(
    entity_name="user",
    owner_field="id",
    create=P.USER_CREATE,
    update_any=P.USER_UPDATE_ANY,
    update_own=P.USER_UPDATE_PROFILE,
    delete_any=P.USER_DELETE,
    restore_any=P.USER_RESTORE,
    hard_delete=P.USER_HARD_DELETE,
    view=P.USER_READ_ALL,
    view_all=P.USER_READ_ALL,
    listing=P.USER_READ_ALL,
)

TAG_POLICY = EntityPolicy(
    entity_name="tag",
    owner_field="created_by_id",
    create=P.TAG_CREATE,
    update_any=P.TAG_UPDATE,
    delete_any=P.TAG_DELETE,
    restore_any=P.TAG_RESTORE,
    view_draft=P.TAG_VIEW_DRAFT,
)

DESTINATION_POLICY = EntityPolicy(
    entity_name="destination",
    owner_field="created_by_id",
    has_visibility=True,
    has_moderation=True,
    create=P.DESTINATION_CREATE,
    update_any=P.DESTINATION_UPDATE,
    delete_any=P.DESTINATION_DELETE,
    restore_any=P.DESTINATION_RESTORE,
    hard_delete=P.DESTINATION_HARD_DELETE,
    view_private=P.DESTINATION_VIEW_PRIVATE,
    view_draft=P.DESTINATION_VIEW_DRAFT,
    view_all=P.DESTINATION_VIEW_ALL,
    visibility_change=P.DESTINATION_VISIBILITY_CHANGE,
)

ACCOMMODATION_POLICY = EntityPolicy(
    entity_name="accommodation",
    owner_field="owner_id",
    has_visibility=True,
    has_moderation=True,
    create=P.ACCOMMODATION_CREATE,
    update_any=P.ACCOMMODATION_UPDATE_ANY,
    update_own=P.ACCOMMODATION_UPDATE_OWN,
    delete_any=P.ACCOMMODATION_DELETE_ANY,
    delete_own=P.ACCOMMODATION_DELETE_OWN,
    restore_any=P.ACCOMMODATION_RESTORE_ANY,
    restore_own=P.ACCOMMODATION_RESTORE_OWN,
    hard_delete=P.ACCOMMODATION_HARD_DELETE,
    view_private=P.ACCOMMODATION_VIEW_PRIVATE,
    view_draft=P.ACCOMMODATION_VIEW_DRAFT,
    view_all=P.ACCOMMODATION_VIEW_ALL,
    visibility_change=P.ACCOMMODATION_VISIBILITY_CHANGE,
)

EVENT_POLICY = EntityPolicy(
    entity_name="event",
    owner_field="author_id",
    has_visibility=True,
    has_moderation=True,
    create=P.EVENT_CREATE,
    update_any=P.EVENT_UPDATE_ANY,
    update_own=P.EVENT_UPDATE_OWN,
    delete_any=P.EVENT_DELETE_ANY,
    delete_own=P.EVENT_DELETE_OWN,
    restore_any=P.EVENT_RESTORE_ANY,
    restore_own=P.EVENT_RESTORE_OWN,
    hard_delete=P.EVENT_HARD_DELETE,
    view_private=P.EVENT_VIEW_PRIVATE,
    view_draft=P.EVENT_VIEW_DRAFT,
    view_all=P.EVENT_VIEW_ALL,
    visibility_change=P.EVENT_VISIBILITY_CHANGE,
)

POST_POLICY = EntityPolicy(
    entity_name="post",
    owner_field="author_id",
    has_visibility=True,
    has_moderation=True,
    create=P.POST_CREATE,
    update_any=P.POST_UPDATE_ANY,
    update_own=P.POST_UPDATE_OWN,
    delete_any=P.POST_DELETE_ANY,
    delete_own=P.POST_DELETE_OWN,
    restore_any=P.POST_RESTORE_ANY,
    restore_own=P.POST_RESTORE_OWN,
    hard_delete=P.POST_HARD_DELETE,
    view_private=P.POST_VIEW_PRIVATE,
    view_draft=P.POST_VIEW_DRAFT,
    view_all=P.POST_VIEW_ALL,
    visibility_change=P.POST_VISIBILITY_CHANGE,
)

CLIENT_POLICY = EntityPolicy(
    entity_name="client",
    owner_field="user_id",
    create=P.CLIENT_CREATE,
    update_any=P.CLIENT_UPDATE,
    delete_any=P.CLIENT_DELETE,
    restore_any=P.CLIENT_DELETE,
    view=P.CLIENT_VIEW,
    view_all=P.CLIENT_VIEW,
)

SUBSCRIPTION_POLICY = EntityPolicy(
    entity_name="subscription",
    has_lifecycle=False,
    create=P.SUBSCRIPTION_CREATE,
    update_any=P.SUBSCRIPTION_UPDATE,
    delete_any=P.SUBSCRIPTION_DELETE,
    restore_any=P.SUBSCRIPTION_DELETE,
    view=P.SUBSCRIPTION_VIEW,
    view_all=P.SUBSCRIPTION_VIEW,
    listing=P.SUBSCRIPTION_VIEW,
)

INVOICE_POLICY = EntityPolicy(
    entity_name="invoice",
    has_lifecycle=False,
    create=P.INVOICE_CREATE,
    update_any=P.INVOICE_UPDATE,
    delete_any=P.INVOICE_DELETE,
    restore_any=P.INVOICE_DELETE,
    view=P.INVOICE_VIEW,
    view_all=P.INVOICE_VIEW,
    listing=P.INVOICE_VIEW,
)
