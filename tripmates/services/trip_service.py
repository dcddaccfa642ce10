import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from tripmates.core.errors import InvalidPayload
from tripmates.models.items import (
    Accommodation,
    Activity,
    ItineraryItem,
    Note,
    PackingItem,
    Reminder,
)
from tripmates.models.trips import Trip, TripInvitation, TripMember
from tripmates.models.users import User
from tripmates.schemas.trips import MUTATING_ROLES, TripCreate, TripRole, TripUpdate
from tripmates.services.membership_service import add_owner, authorize

logger = logging.getLogger(__name__)

CHILD_MODELS = (ItineraryItem, Accommodation, Activity, PackingItem, Note, Reminder)


def create_trip(db: Session, caller: User, payload: TripCreate) -> Trip:
    trip = Trip(
        title=payload.title,
        destination=payload.destination,
        start_date=payload.start_date,
        end_date=payload.end_date,
        created_by_id=caller.id,
        description=payload.description,
    )
    db.add(trip)
    db.flush()
    add_owner(db, trip, caller)
    db.commit()
    db.refresh(trip)
    logger.info("User %s created trip %s", caller.id, trip.id)
    return trip


def list_trips(db: Session, caller: User) -> list[Trip]:
    stmt = (
        select(Trip)
        .join(TripMember, TripMember.trip_id == Trip.id)
        .where(TripMember.user_id == caller.id)
        .order_by(Trip.start_date, Trip.id)
    )
    return list(db.scalars(stmt).all())


def get_trip(db: Session, trip_id: int, caller: User) -> Trip:
    return authorize(db, trip_id, caller).trip


def update_trip(
    db: Session,
    trip_id: int,
    caller: User,
    payload: TripUpdate,
) -> Trip:
    trip = authorize(db, trip_id, caller, MUTATING_ROLES).trip

    changes = payload.changes()
    start_date = changes.get("start_date", trip.start_date)
    end_date = changes.get("end_date", trip.end_date)
    if end_date < start_date:
        raise InvalidPayload("end_date must not be before start_date")

    for field, value in changes.items():
        setattr(trip, field, value)
    db.commit()
    db.refresh(trip)
    return trip


def delete_trip(db: Session, trip_id: int, caller: User) -> None:
    authorize(db, trip_id, caller, {TripRole.owner})

    for model in CHILD_MODELS:
        db.execute(delete(model).where(model.trip_id == trip_id))
    db.execute(delete(TripInvitation).where(TripInvitation.trip_id == trip_id))
    db.execute(delete(TripMember).where(TripMember.trip_id == trip_id))
    db.execute(delete(Trip).where(Trip.id == trip_id))
    db.commit()
    logger.info("User %s deleted trip %s", caller.id, trip_id)
