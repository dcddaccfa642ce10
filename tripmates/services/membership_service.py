from collections.abc import Collection

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from tripmates.core.errors import Denied, NotFound
from tripmates.models.trips import Trip, TripMember
from tripmates.models.users import User
from tripmates.schemas.trips import ANY_ROLE, TripRole


def get_membership(db: Session, trip_id: int, user_id: int) -> TripMember | None:
    stmt = select(TripMember).where(
        TripMember.trip_id == trip_id,
        TripMember.user_id == user_id,
    )
    return db.scalars(stmt).first()


def authorize(
    db: Session,
    trip_id: int,
    caller: User,
    roles: Collection[TripRole] = ANY_ROLE,
) -> TripMember:
    if db.get(Trip, trip_id) is None:
        raise NotFound("Trip not found")

    membership = get_membership(db, trip_id, caller.id)
    if membership is None or membership.role not in roles:
        raise Denied()
    return membership


def list_members(db: Session, trip_id: int, caller: User) -> list[TripMember]:
    authorize(db, trip_id, caller)
    stmt = (
        select(TripMember)
        .where(TripMember.trip_id == trip_id)
        .options(selectinload(TripMember.user), selectinload(TripMember.inviter))
        .order_by(TripMember.joined_at, TripMember.id)
    )
    return list(db.scalars(stmt).all())


def add_owner(db: Session, trip: Trip, owner: User) -> TripMember:
    # Caller commits; the owner row must land with the trip itself.
    membership = TripMember(
        trip_id=trip.id,
        user_id=owner.id,
        role=TripRole.owner,
        invited_by_id=owner.id,
    )
    db.add(membership)
    return membership
