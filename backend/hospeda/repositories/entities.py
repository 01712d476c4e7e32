"""Per-entity repositories. They only declare the model and its free-text search columns."""

from hospeda.models import Accommodation, Client, Destination, Event, Invoice, Post, Subscription, User
from hospeda.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User
    search_columns = ("email", "display_name", "first_name", "last_name")


class DestinationRepository(BaseRepository[Destination]):
    model = Destination
    search_columns = ("name", "summary", "city")


class AccommodationRepository(BaseRepository[Accommodation]):
    model = Accommodation
    search_columns = ("name", "summary")


class EventRepository(BaseRepository[Event]):
    model = Event
    search_columns = ("name", "summary", "location")
    default_sort = "start_date"


class PostRepository(BaseRepository[Post]):
    model = Post
    search_columns = ("title", "summary")


class ClientRepository(BaseRepository[Client]):
    model = Client
    search_columns = ("name", "billing_email")


class SubscriptionRepository(BaseRepository[Subscription]):
    model = Subscription
    search_columns = ("plan_name",)


class InvoiceRepository(BaseRepository[Invoice]):
    model = Invoice
    search_columns = ("invoice_number", "notes")
    default_sort = "issued_at"
