from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from tripmates.api.deps import get_current_user
from tripmates.core.database import get_db
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
from tripmates.schemas.items import (
    AccommodationCreate,
    AccommodationOut,
    AccommodationUpdate,
    ActivityCreate,
    ActivityOut,
    ActivityUpdate,
    ItineraryItemCreate,
    ItineraryItemOut,
    ItineraryItemUpdate,
    NoteCreate,
    NoteOut,
    NoteUpdate,
    PackingItemCreate,
    PackingItemOut,
    PackingItemUpdate,
    ReminderCreate,
    ReminderOut,
    ReminderUpdate,
)
from tripmates.services import trip_item_service


def build_router(
    path: str,
    model: type,
    create_schema: type[BaseModel],
    update_schema: type[PartialUpdate],
    out_schema: type[BaseModel],
    toggle_flag: str | None = None,
) -> APIRouter:
    """
    Routes for one trip collection:

        GET/POST     /trips/{trip_id}/<path>
        PATCH/DELETE /<path>/{item_id}
        POST         /<path>/{item_id}/toggle   (when ``toggle_flag`` is set)
    """
    router = APIRouter(tags=[path])

    @router.get(f"/trips/{{trip_id}}/{path}", response_model=list[out_schema])
    def list_items(
        trip_id: int,
        db: Session = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        return trip_item_service.list_items(db, model, trip_id, user)

    @router.post(
        f"/trips/{{trip_id}}/{path}", response_model=out_schema, status_code=201
    )
    def create_item(
        trip_id: int,
        payload: create_schema,
        db: Session = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        return trip_item_service.create_item(db, model, trip_id, user, payload)

    @router.patch(f"/{path}/{{item_id}}", response_model=out_schema)
    def update_item(
        item_id: int,
        payload: update_schema,
        db: Session = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        return trip_item_service.update_item(db, model, item_id, user, payload)

    @router.delete(f"/{path}/{{item_id}}", status_code=204)
    def delete_item(
        item_id: int,
        db: Session = Depends(get_db),
        user: User = Depends(get_current_user),
    ):
        trip_item_service.delete_item(db, model, item_id, user)
        return Response(status_code=204)

    if toggle_flag:

        @router.post(f"/{path}/{{item_id}}/toggle", response_model=out_schema)
        def toggle_item(
            item_id: int,
            db: Session = Depends(get_db),
            user: User = Depends(get_current_user),
        ):
            return trip_item_service.toggle_flag(
                db, model, item_id, user, toggle_flag
            )

    return router


routers = [
    build_router(
        "itinerary-items",
        ItineraryItem,
        ItineraryItemCreate,
        ItineraryItemUpdate,
        ItineraryItemOut,
    ),
    build_router(
        "accommodations",
        Accommodation,
        AccommodationCreate,
        AccommodationUpdate,
        AccommodationOut,
    ),
    build_router(
        "activities", Activity, ActivityCreate, ActivityUpdate, ActivityOut
    ),
    build_router(
        "packing-items",
        PackingItem,
        PackingItemCreate,
        PackingItemUpdate,
        PackingItemOut,
        toggle_flag="packed",
    ),
    build_router("notes", Note, NoteCreate, NoteUpdate, NoteOut),
    build_router(
        "reminders",
        Reminder,
        ReminderCreate,
        ReminderUpdate,
        ReminderOut,
        toggle_flag="completed",
    ),
]
