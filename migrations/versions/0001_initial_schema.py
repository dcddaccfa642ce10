"""initial trip planning schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "0001_initial_schema"
down_revision = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None

trip_role_enum = postgresql.ENUM(
    "owner", "editor", "viewer", name="triprole", create_type=False
)
invitation_status_enum = postgresql.ENUM(
    "pending", "accepted", "expired", name="invitationstatus", create_type=False
)
itinerary_type_enum = postgresql.ENUM(
    "activity",
    "transport",
    "meal",
    "accommodation",
    name="itinerarytype",
    create_type=False,
)
activity_status_enum = postgresql.ENUM(
    "planned", "booked", "completed", name="activitystatus", create_type=False
)

ENUMS = (
    trip_role_enum,
    invitation_status_enum,
    itinerary_type_enum,
    activity_status_enum,
)

CHILD_TABLES = (
    "itinerary_items",
    "accommodations",
    "activities",
    "packing_items",
    "notes",
    "reminders",
)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )


def _child_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "trip_id",
            sa.Integer(),
            sa.ForeignKey("trips.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False
        ),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for enum in ENUMS:
        enum.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("subject", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_users_subject", "users", ["subject"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=False)

    op.create_table(
        "trips",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("destination", sa.String(length=200), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column(
            "created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("description", sa.Text(), nullable=True),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            server_onupdate=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_trips_created_by_id", "trips", ["created_by_id"])

    op.create_table(
        "trip_members",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "trip_id",
            sa.Integer(),
            sa.ForeignKey("trips.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("role", trip_role_enum, nullable=False),
        sa.Column(
            "invited_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column(
            "joined_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("trip_id", "user_id", name="uq_trip_member"),
    )
    op.create_index("ix_trip_members_trip_id", "trip_members", ["trip_id"])
    op.create_index("ix_trip_members_user_id", "trip_members", ["user_id"])

    op.create_table(
        "trip_invitations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "trip_id",
            sa.Integer(),
            sa.ForeignKey("trips.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("role", trip_role_enum, nullable=False),
        sa.Column("token_hash", sa.String(), nullable=False, unique=True),
        sa.Column(
            "invited_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column(
            "invited_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "status",
            invitation_status_enum,
            server_default="pending",
            nullable=False,
        ),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_trip_invitations_trip_id", "trip_invitations", ["trip_id"])
    op.create_index("ix_trip_invitations_email", "trip_invitations", ["email"])
    op.create_index(
        "uq_trip_invitations_pending",
        "trip_invitations",
        ["trip_id", "email"],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
        sqlite_where=sa.text("status = 'pending'"),
    )

    op.create_table(
        "itinerary_items",
        *_child_columns(),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("type", itinerary_type_enum, nullable=False),
        sa.Column("time", sa.Time(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        _created_at(),
    )
    op.create_table(
        "accommodations",
        *_child_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("check_in", sa.Date(), nullable=False),
        sa.Column("check_out", sa.Date(), nullable=False),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("confirmation_number", sa.String(length=100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_table(
        "activities",
        *_child_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("time", sa.Time(), nullable=True),
        sa.Column("cost", sa.String(length=100), nullable=True),
        sa.Column(
            "booking_required",
            sa.Boolean(),
            server_default=sa.false(),
            nullable=False,
        ),
        sa.Column("status", activity_status_enum, nullable=False),
        _created_at(),
    )
    op.create_table(
        "packing_items",
        *_child_columns(),
        sa.Column("item", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("packed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column(
            "assigned_to_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True
        ),
        _created_at(),
    )
    op.create_table(
        "notes",
        *_child_columns(),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_table(
        "reminders",
        *_child_columns(),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("completed", sa.Boolean(), server_default=sa.false(), nullable=False),
        _created_at(),
    )
    for table in CHILD_TABLES:
        op.create_index(f"ix_{table}_trip_id", table, ["trip_id"])


def downgrade() -> None:
    for table in reversed(CHILD_TABLES):
        op.drop_index(f"ix_{table}_trip_id", table_name=table)
        op.drop_table(table)

    op.drop_index("uq_trip_invitations_pending", table_name="trip_invitations")
    op.drop_index("ix_trip_invitations_email", table_name="trip_invitations")
    op.drop_index("ix_trip_invitations_trip_id", table_name="trip_invitations")
    op.drop_table("trip_invitations")

    op.drop_index("ix_trip_members_user_id", table_name="trip_members")
    op.drop_index("ix_trip_members_trip_id", table_name="trip_members")
    op.drop_table("trip_members")

    op.drop_index("ix_trips_created_by_id", table_name="trips")
    op.drop_table("trips")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_subject", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    for enum in reversed(ENUMS):
        enum.drop(bind, checkfirst=True)
