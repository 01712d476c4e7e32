"""Create core tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates every table of the service core: users, tags, r_entity_tag,
       destinations, accommodations, events, posts, clients, subscriptions
       and invoices.
How:   Each entity table carries the shared audit / tombstone columns and,
       where applicable, lifecycle, visibility and moderation state stored
       as plain strings (see hospeda/models/base.py).

Rollback: downgrade() drops every table in reverse dependency order.
"""

from typing import List, Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def audit_columns() -> List[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("created_by_id", sa.Uuid(), nullable=True),
        sa.Column("updated_by_id", sa.Uuid(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted_by_id", sa.Uuid(), nullable=True),
    ]


def lifecycle_column() -> sa.Column:
    return sa.Column("lifecycle_state", sa.String(20), nullable=False, server_default="ACTIVE")


def content_state_columns() -> List[sa.Column]:
    return [
        lifecycle_column(),
        sa.Column("visibility", sa.String(20), nullable=False, server_default="PUBLIC"),
        sa.Column("moderation_state", sa.String(20), nullable=False, server_default="PENDING"),
    ]


def index_deleted_at(table: str) -> None:
    op.create_index(f"ix_{table}_deleted_at", table, ["deleted_at"])


def upgrade() -> None:
    op.create_table(
        "users",
        *audit_columns(),
        lifecycle_column(),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="USER"),
        sa.Column("permissions", sa.JSON(), nullable=False),
    )
    index_deleted_at("users")

    op.create_table(
        "tags",
        *audit_columns(),
        lifecycle_column(),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("slug", sa.String(60), nullable=False, unique=True),
        sa.Column("color", sa.String(20), nullable=False, server_default="BLUE"),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    index_deleted_at("tags")

    op.create_table(
        "r_entity_tag",
        sa.Column("tag_id", sa.Uuid(), sa.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("entity_id", sa.Uuid(), primary_key=True),
        sa.Column("entity_type", sa.String(30), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("created_by_id", sa.Uuid(), nullable=True),
    )
    op.create_index("idx_entity_tag_entity", "r_entity_tag", ["entity_type", "entity_id"])

    op.create_table(
        "destinations",
        *audit_columns(),
        *content_state_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False, unique=True),
        sa.Column("summary", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("state", sa.String(100), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    index_deleted_at("destinations")

    op.create_table(
        "accommodations",
        *audit_columns(),
        *content_state_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False, unique=True),
        sa.Column("summary", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("destination_id", sa.Uuid(), sa.ForeignKey("destinations.id"), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=True),
        sa.Column("currency", sa.String(3), nullable=False, server_default="ARS"),
        sa.Column("max_guests", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("bedrooms", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    index_deleted_at("accommodations")
    op.create_index("idx_accommodations_owner", "accommodations", ["owner_id"])
    op.create_index("idx_accommodations_destination", "accommodations", ["destination_id"])

    op.create_table(
        "events",
        *audit_columns(),
        *content_state_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False, unique=True),
        sa.Column("summary", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(30), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("destination_id", sa.Uuid(), sa.ForeignKey("destinations.id"), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("is_free", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("price_from", sa.Numeric(12, 2), nullable=True),
        sa.Column("price_to", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    index_deleted_at("events")
    op.create_index("ix_events_author_id", "events", ["author_id"])

    op.create_table(
        "posts",
        *audit_columns(),
        *content_state_columns(),
        sa.Column("title", sa.String(150), nullable=False),
        sa.Column("slug", sa.String(170), nullable=False, unique=True),
        sa.Column("summary", sa.String(300), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(30), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_news", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    index_deleted_at("posts")
    op.create_index("ix_posts_author_id", "posts", ["author_id"])

    op.create_table(
        "clients",
        *audit_columns(),
        lifecycle_column(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("billing_email", sa.String(255), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
    )
    index_deleted_at("clients")
    op.create_index("ix_clients_user_id", "clients", ["user_id"])

    op.create_table(
        "subscriptions",
        *audit_columns(),
        sa.Column("client_id", sa.Uuid(), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("plan_name", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("cancel_at_period_end", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    index_deleted_at("subscriptions")
    op.create_index("ix_subscriptions_client_id", "subscriptions", ["client_id"])

    op.create_table(
        "invoices",
        *audit_columns(),
        sa.Column("client_id", sa.Uuid(), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("invoice_number", sa.String(40), nullable=False, unique=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="DRAFT"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="ARS"),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("tax", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("issued_at", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    index_deleted_at("invoices")
    op.create_index("ix_invoices_client_id", "invoices", ["client_id"])


def downgrade() -> None:
    for table in (
        "invoices",
        "subscriptions",
        "clients",
        "posts",
        "events",
        "accommodations",
        "destinations",
        "r_entity_tag",
        "tags",
        "users",
    ):
        op.drop_table(table)
