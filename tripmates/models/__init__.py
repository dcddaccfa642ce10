from tripmates.core.database import Base
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

__all__ = [
    "Accommodation",
    "Activity",
    "Base",
    "ItineraryItem",
    "Note",
    "PackingItem",
    "Reminder",
    "Trip",
    "TripInvitation",
    "TripMember",
    "User",
]
