from __future__ import annotations

import datetime

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tripmates.core.database import Base
from tripmates.models.users import User
from tripmates.schemas.trips import InvitationStatus, TripRole


def _role_enum() -> Enum:
    return Enum(
        TripRole,
        name="triprole",
        values_callable=lambda enum_cls: [e.value for e in enum_cls],
    )


class Trip(Base):
    __tablename__ = "trips"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    title: Mapped[str] = mapped_column(String(200))
    destination: Mapped[str] = mapped_column(String(200))
    start_date: Mapped[datetime.date] = mapped_column(Date)
    end_date: Mapped[datetime.date] = mapped_column(Date)
    created_by_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        init=False,
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        onupdate=func.now(),
        init=False,
    )

    created_by: Mapped[User] = relationship(init=False)
    members: Mapped[list[TripMember]] = relationship(
        back_populates="trip", init=False, passive_deletes=True
    )


class TripMember(Base):
    __tablename__ = "trip_members"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    trip_id: Mapped[int] = mapped_column(
        ForeignKey("trips.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    role: Mapped[TripRole] = mapped_column(_role_enum())
    invited_by_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    joined_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=func.now(),
        server_default=func.now(),
        init=False,
    )

    trip: Mapped[Trip] = relationship(back_populates="members", init=False)
    user: Mapped[User] = relationship(foreign_keys="TripMember.user_id", init=False)
    inviter: Mapped[User] = relationship(
        foreign_keys="TripMember.invited_by_id", init=False
    )

    __table_args__ = (
        UniqueConstraint("trip_id", "user_id", name="uq_trip_member"),
    )


class TripInvitation(Base):
    __tablename__ = "trip_invitations"

    id: Mapped[int] = mapped_column(primary_key=True, init=False)
    trip_id: Mapped[int] = mapped_column(
        ForeignKey("trips.id", ondelete="CASCADE"), index=True
    )
    email: Mapped[str] = mapped_column(index=True)
    role: Mapped[TripRole] = mapped_column(_role_enum())
    token_hash: Mapped[str] = mapped_column(unique=True, repr=False)
    invited_by_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    invited_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    expires_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True))
    status: Mapped[InvitationStatus] = mapped_column(
        Enum(
            InvitationStatus,
            name="invitationstatus",
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
        ),
        default=InvitationStatus.pending,
        server_default=InvitationStatus.pending.value,
    )
    responded_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )

    trip: Mapped[Trip] = relationship(init=False)
    inviter: Mapped[User] = relationship(init=False)

    __table_args__ = (
        # At most one open invitation per address and trip.
        Index(
            "uq_trip_invitations_pending",
            "trip_id",
            "email",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )
