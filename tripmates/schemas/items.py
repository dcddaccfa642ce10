import datetime as dt
from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tripmates.schemas.common import PartialUpdate


class ItineraryType(StrEnum):
    activity = "activity"
    transport = "transport"
    meal = "meal"
    accommodation = "accommodation"


class ActivityStatus(StrEnum):
    planned = "planned"
    booked = "booked"
    completed = "completed"


class TripItemOut(BaseModel):
    id: int
    trip_id: int
    created_by_id: int
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


# ---------- Itinerary ----------
class ItineraryItemCreate(BaseModel):
    date: dt.date
    title: str = Field(min_length=1, max_length=200)
    type: ItineraryType
    time: dt.time | None = None
    description: str | None = None
    location: str | None = None


class ItineraryItemUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"date", "title", "type"})

    date: dt.date | None = None
    title: str | None = Field(default=None, min_length=1, max_length=200)
    type: ItineraryType | None = None
    time: dt.time | None = None
    description: str | None = None
    location: str | None = None


class ItineraryItemOut(TripItemOut):
    date: dt.date
    time: dt.time | None
    title: str
    description: str | None
    location: str | None
    type: ItineraryType


# ---------- Accommodations ----------
class AccommodationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    check_in: dt.date
    check_out: dt.date
    address: str | None = None
    confirmation_number: str | None = Field(default=None, max_length=100)
    notes: str | None = None

    @model_validator(mode="after")
    def _validate_stay(self) -> "AccommodationCreate":
        if self.check_out < self.check_in:
            raise ValueError("check_out must not be before check_in")
        return self


class AccommodationUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset[str]] = frozenset(
        {"name", "check_in", "check_out"}
    )

    name: str | None = Field(default=None, min_length=1, max_length=200)
    check_in: dt.date | None = None
    check_out: dt.date | None = None
    address: str | None = None
    confirmation_number: str | None = Field(default=None, max_length=100)
    notes: str | None = None


class AccommodationOut(TripItemOut):
    name: str
    address: str | None
    check_in: dt.date
    check_out: dt.date
    confirmation_number: str | None
    notes: str | None


# ---------- Activities ----------
class ActivityCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    location: str | None = None
    date: dt.date | None = None
    time: dt.time | None = None
    cost: str | None = Field(default=None, max_length=100)
    booking_required: bool = False
    status: ActivityStatus = ActivityStatus.planned


class ActivityUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset[str]] = frozenset(
        {"name", "booking_required", "status"}
    )

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    location: str | None = None
    date: dt.date | None = None
    time: dt.time | None = None
    cost: str | None = Field(default=None, max_length=100)
    booking_required: bool | None = None
    status: ActivityStatus | None = None


class ActivityOut(TripItemOut):
    name: str
    description: str | None
    location: str | None
    date: dt.date | None
    time: dt.time | None
    cost: str | None
    booking_required: bool
    status: ActivityStatus


# ---------- Packing ----------
class PackingItemCreate(BaseModel):
    item: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=100)
    assigned_to_id: int | None = None


class PackingItemUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"item", "category"})

    item: str | None = Field(default=None, min_length=1, max_length=200)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    assigned_to_id: int | None = None


class PackingItemOut(TripItemOut):
    item: str
    category: str
    packed: bool
    assigned_to_id: int | None


# ---------- Notes ----------
class NoteCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str


class NoteUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"title", "content"})

    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = None


class NoteOut(TripItemOut):
    title: str
    content: str


# ---------- Reminders ----------
class ReminderCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    due_date: dt.date
    description: str | None = None


class ReminderUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"title", "due_date"})

    title: str | None = Field(default=None, min_length=1, max_length=200)
    due_date: dt.date | None = None
    description: str | None = None


class ReminderOut(TripItemOut):
    title: str
    description: str | None
    due_date: dt.date
    completed: bool
