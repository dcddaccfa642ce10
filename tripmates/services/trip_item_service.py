"""
One CRUD pattern shared by the six collections hanging off a trip.

Reads need any membership on the trip; writes need owner or editor. Rows are
looked up by id first and authorized against the trip they belong to.
"""

from collections.abc import Collection
from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from tripmates.core.errors import InvalidPayload, NotFound
from tripmates.models.items import (
    Accommodation,
    Activity,
    ItineraryItem,
    Note,
    PackingItem,
    Reminder,
)
from tripmates.models.users import User
from tripmates.schemas.common import PartialUpdate
from tripmates.schemas.trips import ANY_ROLE, MUTATING_ROLES, TripRole
from tripmates.services.membership_service import authorize, get_membership

ItemT = TypeVar(
    "ItemT", ItineraryItem, Accommodation, Activity, PackingItem, Note, Reminder
)

ORDERING: dict[type, tuple[Any, ...]] = {
    ItineraryItem: (ItineraryItem.date, ItineraryItem.time, ItineraryItem.id),
    Accommodation: (Accommodation.id,),
    Activity: (Activity.id,),
    PackingItem: (PackingItem.category, PackingItem.id),
    Note: (Note.id,),
    Reminder: (Reminder.due_date, Reminder.id),
}


def _get_item(
    db: Session,
    model: type[ItemT],
    item_id: int,
    caller: User,
    roles: Collection[TripRole],
) -> ItemT:
    item = db.get(model, item_id)
    if item is None:
        raise NotFound(f"{model.__name__} not found")
    authorize(db, item.trip_id, caller, roles)
    return item


def _validate(db: Session, item: Any) -> None:
    if isinstance(item, Accommodation) and item.check_out < item.check_in:
        raise InvalidPayload("check_out must not be before check_in")
    if isinstance(item, PackingItem) and item.assigned_to_id is not None:
        if get_membership(db, item.trip_id, item.assigned_to_id) is None:
            raise InvalidPayload("Packing items can only be assigned to trip members")


def list_items(
    db: Session,
    model: type[ItemT],
    trip_id: int,
    caller: User,
) -> list[ItemT]:
    authorize(db, trip_id, caller, ANY_ROLE)
    stmt = select(model).where(model.trip_id == trip_id).order_by(*ORDERING[model])
    return list(db.scalars(stmt).all())


def create_item(
    db: Session,
    model: type[ItemT],
    trip_id: int,
    caller: User,
    payload: BaseModel,
) -> ItemT:
    authorize(db, trip_id, caller, MUTATING_ROLES)
    item = model(trip_id=trip_id, created_by_id=caller.id, **payload.model_dump())
    _validate(db, item)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_item(
    db: Session,
    model: type[ItemT],
    item_id: int,
    caller: User,
    payload: PartialUpdate,
) -> ItemT:
    item = _get_item(db, model, item_id, caller, MUTATING_ROLES)
    for field, value in payload.changes().items():
        setattr(item, field, value)
    try:
        _validate(db, item)
    except InvalidPayload:
        db.rollback()
        raise
    db.commit()
    db.refresh(item)
    return item


def delete_item(
    db: Session,
    model: type[ItemT],
    item_id: int,
    caller: User,
) -> None:
    item = _get_item(db, model, item_id, caller, MUTATING_ROLES)
    db.delete(item)
    db.commit()


def toggle_flag(
    db: Session,
    model: type[ItemT],
    item_id: int,
    caller: User,
    flag: str,
) -> ItemT:
    item = _get_item(db, model, item_id, caller, MUTATING_ROLES)
    setattr(item, flag, not getattr(item, flag))
    db.commit()
    db.refresh(item)
    return item
