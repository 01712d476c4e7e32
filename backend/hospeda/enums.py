"""
Hospeda Backend — Domain Enumerations
======================================

What:  String enums shared by models, schemas, permissions and routes.
How:   Every enum subclasses `str` so values compare equal to the raw strings
       stored in the database and sent over JSON.
"""

from enum import Enum


class RoleEnum(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    HOST = "HOST"
    USER = "USER"
    GUEST = "GUEST"


class LifecycleStatusEnum(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class VisibilityEnum(str, Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    RESTRICTED = "RESTRICTED"


class ModerationStatusEnum(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class EntityTypeEnum(str, Enum):
    """Entity types that can carry tags (r_entity_tag.entity_type)."""

    ACCOMMODATION = "ACCOMMODATION"
    DESTINATION = "DESTINATION"
    EVENT = "EVENT"
    POST = "POST"
    USER = "USER"


class AccommodationTypeEnum(str, Enum):
    APARTMENT = "APARTMENT"
    HOUSE = "HOUSE"
    COUNTRY_HOUSE = "COUNTRY_HOUSE"
    CABIN = "CABIN"
    HOTEL = "HOTEL"
    HOSTEL = "HOSTEL"
    CAMPING = "CAMPING"
    ROOM = "ROOM"


class EventCategoryEnum(str, Enum):
    MUSIC = "MUSIC"
    CULTURE = "CULTURE"
    SPORTS = "SPORTS"
    GASTRONOMY = "GASTRONOMY"
    FESTIVAL = "FESTIVAL"
    NATURE = "NATURE"
    THEATER = "THEATER"
    WORKSHOP = "WORKSHOP"
    OTHER = "OTHER"


class PostCategoryEnum(str, Enum):
    EVENTS = "EVENTS"
    CULTURE = "CULTURE"
    GASTRONOMY = "GASTRONOMY"
    NATURE = "NATURE"
    TOURISM = "TOURISM"
    GENERAL = "GENERAL"


class TagColorEnum(str, Enum):
    RED = "RED"
    BLUE = "BLUE"
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    ORANGE = "ORANGE"
    PURPLE = "PURPLE"
    GREY = "GREY"


class SubscriptionStatusEnum(str, Enum):
    TRIALING = "TRIALING"
    ACTIVE = "ACTIVE"
    PAST_DUE = "PAST_DUE"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


class InvoiceStatusEnum(str, Enum):
    DRAFT = "DRAFT"
    OPEN = "OPEN"
    PAID = "PAID"
    VOID = "VOID"


class PermissionEnum(str, Enum):
    """
    Explicit capabilities carried by an actor, named `<entity>.<action>`.

    `*.own` permissions apply to records the actor owns, `*.any` to every
    record. Elevated roles (ADMIN, SUPER_ADMIN) do not need any of these.
    """

    # ── Accommodation ─────────────────────────────────────────────────────
    ACCOMMODATION_CREATE = "accommodation.create"
    ACCOMMODATION_UPDATE_OWN = "accommodation.update.own"
    ACCOMMODATION_UPDATE_ANY = "accommodation.update.any"
    ACCOMMODATION_DELETE_OWN = "accommodation.delete.own"
    ACCOMMODATION_DELETE_ANY = "accommodation.delete.any"
    ACCOMMODATION_RESTORE_OWN = "accommodation.restore.own"
    ACCOMMODATION_RESTORE_ANY = "accommodation.restore.any"
    ACCOMMODATION_HARD_DELETE = "accommodation.hardDelete"
    ACCOMMODATION_VIEW_PRIVATE = "accommodation.view.private"
    ACCOMMODATION_VIEW_DRAFT = "accommodation.view.draft"
    ACCOMMODATION_VIEW_ALL = "accommodation.view.all"
    ACCOMMODATION_VISIBILITY_CHANGE = "accommodation.visibility.change"

    # ── Destination ───────────────────────────────────────────────────────
    DESTINATION_CREATE = "destination.create"
    DESTINATION_UPDATE = "destination.update"
    DESTINATION_DELETE = "destination.delete"
    DESTINATION_RESTORE = "destination.restore"
    DESTINATION_HARD_DELETE = "destination.hardDelete"
    DESTINATION_VIEW_PRIVATE = "destination.view.private"
    DESTINATION_VIEW_DRAFT = "destination.view.draft"
    DESTINATION_VIEW_ALL = "destination.view.all"
    DESTINATION_VISIBILITY_CHANGE = "destination.visibility.change"

    # ── Event ─────────────────────────────────────────────────────────────
    EVENT_CREATE = "event.create"
    EVENT_UPDATE_OWN = "event.update.own"
    EVENT_UPDATE_ANY = "event.update.any"
    EVENT_DELETE_OWN = "event.delete.own"
    EVENT_DELETE_ANY = "event.delete.any"
    EVENT_RESTORE_OWN = "event.restore.own"
    EVENT_RESTORE_ANY = "event.restore.any"
    EVENT_HARD_DELETE = "event.hardDelete"
    EVENT_VIEW_PRIVATE = "event.view.private"
    EVENT_VIEW_DRAFT = "event.view.draft"
    EVENT_VIEW_ALL = "event.view.all"
    EVENT_VISIBILITY_CHANGE = "event.visibility.change"

    # ── Post ──────────────────────────────────────────────────────────────
    POST_CREATE = "post.create"
    POST_UPDATE_OWN = "post.update.own"
    POST_UPDATE_ANY = "post.update.any"
    POST_DELETE_OWN = "post.delete.own"
    POST_DELETE_ANY = "post.delete.any"
    POST_RESTORE_OWN = "post.restore.own"
    POST_RESTORE_ANY = "post.restore.any"
    POST_HARD_DELETE = "post.hardDelete"
    POST_VIEW_PRIVATE = "post.view.private"
    POST_VIEW_DRAFT = "post.view.draft"
    POST_VIEW_ALL = "post.view.all"
    POST_VISIBILITY_CHANGE = "post.visibility.change"

    # ── User ──────────────────────────────────────────────────────────────
    USER_CREATE = "user.create"
    USER_UPDATE_PROFILE = "user.update.profile"
    USER_UPDATE_ANY = "user.update.any"
    USER_UPDATE_ROLES = "user.update.roles"
    USER_DELETE = "user.delete"
    USER_RESTORE = "user.restore"
    USER_HARD_DELETE = "user.hardDelete"
    USER_READ_ALL = "user.read.all"

    # ── Tag ───────────────────────────────────────────────────────────────
    TAG_CREATE = "tag.create"
    TAG_UPDATE = "tag.update"
    TAG_DELETE = "tag.delete"
    TAG_RESTORE = "tag.restore"
    TAG_VIEW_DRAFT = "tag.view.draft"

    # ── Billing ───────────────────────────────────────────────────────────
    CLIENT_CREATE = "client.create"
    CLIENT_UPDATE = "client.update"
    CLIENT_DELETE = "client.delete"
    CLIENT_VIEW = "client.view"
    SUBSCRIPTION_CREATE = "subscription.create"
    SUBSCRIPTION_UPDATE = "subscription.update"
    SUBSCRIPTION_DELETE = "subscription.delete"
    SUBSCRIPTION_VIEW = "subscription.view"
    INVOICE_CREATE = "invoice.create"
    INVOICE_UPDATE = "invoice.update"
    INVOICE_DELETE = "invoice.delete"
    INVOICE_VIEW = "invoice.view"
