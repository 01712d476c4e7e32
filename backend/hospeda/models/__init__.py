"""ORM models. Importing this package registers every table on `Base.metadata`."""

from hospeda.models.accommodation import Accommodation
from hospeda.models.billing import Client, Invoice, Subscription
from hospeda.models.destination import Destination
from hospeda.models.event import Event
from hospeda.models.post import Post
from hospeda.models.tag import EntityTag, Tag
from hospeda.models.user import User

__all__ = [
    "Accommodation",
    "Client",
    "Destination",
    "EntityTag",
    "Event",
    "Invoice",
    "Post",
    "Subscription",
    "Tag",
    "User",
]
