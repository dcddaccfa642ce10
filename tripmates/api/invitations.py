from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tripmates.api.deps import get_current_user
from tripmates.core.database import get_db
from tripmates.models.users import User
from tripmates.schemas.trips import (
    InvitationAcceptOut,
    InvitationPreviewOut,
    InvitationTokenIn,
)
from tripmates.services import invitation_service

router = APIRouter(prefix="/invitations", tags=["invitations"])


@router.post("/preview", response_model=InvitationPreviewOut)
def preview_invitation(body: InvitationTokenIn, db: Session = Depends(get_db)):
    invitation = invitation_service.preview_invitation(
        db, body.token.get_secret_value()
    )
    return InvitationPreviewOut(
        trip_id=invitation.trip_id,
        trip_title=invitation.trip.title,
        email=invitation.email,
        role=invitation.role,
        expires_at=invitation.expires_at,
    )


@router.post("/accept", response_model=InvitationAcceptOut)
def accept_invitation(
    body: InvitationTokenIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip_id = invitation_service.accept_invitation(
        db, body.token.get_secret_value(), user
    )
    return InvitationAcceptOut(trip_id=trip_id)
