from fastapi import APIRouter, BackgroundTasks, Depends, Response
from sqlalchemy.orm import Session

from tripmates.api.deps import get_current_user
from tripmates.core.config import Settings, get_settings
from tripmates.core.database import get_db
from tripmates.core.errors import ServiceNotConfigured
from tripmates.models.users import User
from tripmates.schemas.trips import (
    InvitationOut,
    InviteIn,
    MemberOut,
    TripCreate,
    TripOut,
    TripUpdate,
)
from tripmates.services import invitation_service, membership_service, trip_service
from tripmates.services.email_service import send_trip_invitation

router = APIRouter(prefix="/trips", tags=["trips"])


def _require_base_url(settings: Settings) -> str:
    base_url = settings.invite_base_url
    if not base_url:
        raise ServiceNotConfigured("Invitation service is not configured")
    return base_url.rstrip("/")


@router.post("/", response_model=TripOut, status_code=201)
def create_trip(
    payload: TripCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return trip_service.create_trip(db, user, payload)


@router.get("/", response_model=list[TripOut])
def list_trips(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return trip_service.list_trips(db, user)


@router.get("/{trip_id}", response_model=TripOut)
def get_trip(
    trip_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return trip_service.get_trip(db, trip_id, user)


@router.patch("/{trip_id}", response_model=TripOut)
def update_trip(
    trip_id: int,
    payload: TripUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return trip_service.update_trip(db, trip_id, user, payload)


@router.delete("/{trip_id}", status_code=204)
def delete_trip(
    trip_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip_service.delete_trip(db, trip_id, user)
    return Response(status_code=204)


@router.get("/{trip_id}/members", response_model=list[MemberOut])
def list_members(
    trip_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return membership_service.list_members(db, trip_id, user)


@router.post("/{trip_id}/invitations", response_model=InvitationOut, status_code=201)
def invite_member(
    trip_id: int,
    payload: InviteIn,
    bg: BackgroundTasks,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    user: User = Depends(get_current_user),
):
    base_url = _require_base_url(settings)
    invitation, raw_token = invitation_service.invite_member(db, trip_id, user, payload)

    invitation_link = f"{base_url}?invite={raw_token}"
    bg.add_task(
        send_trip_invitation,
        invitation.email,
        invitation_link,
        invitation.trip.title,
        user.name,
    )
    return invitation


@router.get("/{trip_id}/invitations", response_model=list[InvitationOut])
def list_invitations(
    trip_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return invitation_service.list_invitations(db, trip_id, user)
