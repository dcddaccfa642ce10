import logging
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from tripmates.core.config import get_settings
from tripmates.core.errors import (
    AlreadyMember,
    DuplicateInvitation,
    EmailMismatch,
    InvalidInvitation,
    InvitationExpired,
)
from tripmates.core.security import generate_raw_token, hash_token, normalize_email
from tripmates.models.trips import TripInvitation, TripMember
from tripmates.models.users import User
from tripmates.schemas.trips import InvitationStatus, InviteIn, MUTATING_ROLES
from tripmates.services.membership_service import authorize, get_membership

logger = logging.getLogger(__name__)


def _coerce_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _is_expired(invitation: TripInvitation, now: datetime) -> bool:
    return _coerce_utc(invitation.expires_at) < now


def _ensure_unique_token_hash(db: Session, raw_token: str) -> tuple[str, str]:
    token_hash = hash_token(raw_token)
    existing = db.scalars(
        select(TripInvitation.id).where(TripInvitation.token_hash == token_hash)
    ).first()
    if existing is not None:
        return _ensure_unique_token_hash(db, generate_raw_token(32))
    return raw_token, token_hash


def _expire_stale(
    db: Session,
    invitations: Iterable[TripInvitation],
    now: datetime,
) -> int:
    stale_ids = [
        invitation.id
        for invitation in invitations
        if invitation.status == InvitationStatus.pending
        and _is_expired(invitation, now)
    ]
    if not stale_ids:
        return 0
    result = db.execute(
        update(TripInvitation)
        .where(
            TripInvitation.id.in_(stale_ids),
            TripInvitation.status == InvitationStatus.pending,
        )
        .values(status=InvitationStatus.expired)
    )
    return result.rowcount or 0


def _find_pending_by_token(db: Session, raw_token: str) -> TripInvitation | None:
    stmt = (
        select(TripInvitation)
        .where(
            TripInvitation.token_hash == hash_token(raw_token),
            TripInvitation.status == InvitationStatus.pending,
        )
        .options(selectinload(TripInvitation.trip))
    )
    return db.scalars(stmt).first()


def invite_member(
    db: Session,
    trip_id: int,
    caller: User,
    payload: InviteIn,
    *,
    now: datetime | None = None,
) -> tuple[TripInvitation, str]:
    """
    Issue a pending invitation for ``payload.email`` on the trip.

    Returns the persisted invitation and the raw token; only the token hash
    is stored, so the raw value must be delivered to the invitee now.
    """
    authorize(db, trip_id, caller, MUTATING_ROLES)
    email = normalize_email(payload.email)

    member_stmt = (
        select(TripMember.id)
        .join(User, User.id == TripMember.user_id)
        .where(TripMember.trip_id == trip_id, User.email == email)
    )
    if db.scalars(member_stmt).first() is not None:
        raise AlreadyMember()

    now = now or datetime.now(UTC)
    pending = db.scalars(
        select(TripInvitation).where(
            TripInvitation.trip_id == trip_id,
            TripInvitation.email == email,
            TripInvitation.status == InvitationStatus.pending,
        )
    ).all()
    if any(not _is_expired(invitation, now) for invitation in pending):
        raise DuplicateInvitation()
    _expire_stale(db, pending, now)

    raw_token, token_hash = _ensure_unique_token_hash(db, generate_raw_token(32))
    ttl_days = get_settings().invite_ttl_days
    invitation = TripInvitation(
        trip_id=trip_id,
        email=email,
        role=payload.role,
        token_hash=token_hash,
        invited_by_id=caller.id,
        invited_at=now,
        expires_at=(now + timedelta(days=ttl_days)).replace(microsecond=0),
    )
    db.add(invitation)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateInvitation() from None

    db.refresh(invitation)
    logger.info(
        "User %s invited %s to trip %s as %s",
        caller.id,
        email,
        trip_id,
        payload.role,
    )
    return invitation, raw_token


def preview_invitation(
    db: Session,
    raw_token: str,
    *,
    now: datetime | None = None,
) -> TripInvitation:
    invitation = _find_pending_by_token(db, raw_token)
    if invitation is None:
        raise InvalidInvitation()

    now = now or datetime.now(UTC)
    if _is_expired(invitation, now):
        _expire_stale(db, [invitation], now)
        db.commit()
        raise InvitationExpired()
    return invitation


def accept_invitation(
    db: Session,
    raw_token: str,
    caller: User,
    *,
    now: datetime | None = None,
) -> int:
    """
    Consume a pending invitation and make ``caller`` a member of its trip.

    The pending -> accepted transition is a conditional update on the
    invitation row: when two callers race, only the one whose update touches
    the row gets the membership; the other fails with ``InvalidInvitation``,
    even when both requests come from the same user. The membership check and
    insert share the transaction with that update.
    """
    invitation = _find_pending_by_token(db, raw_token)
    if invitation is None:
        raise InvalidInvitation()

    now = now or datetime.now(UTC)
    if _is_expired(invitation, now):
        _expire_stale(db, [invitation], now)
        db.commit()
        raise InvitationExpired()

    if not caller.email or normalize_email(caller.email) != invitation.email:
        raise EmailMismatch()

    trip_id = invitation.trip_id
    claimed = db.execute(
        update(TripInvitation)
        .where(
            TripInvitation.id == invitation.id,
            TripInvitation.status == InvitationStatus.pending,
        )
        .values(status=InvitationStatus.accepted, responded_at=now)
        .execution_options(synchronize_session=False)
    )
    if claimed.rowcount != 1:
        db.rollback()
        raise InvalidInvitation()

    if get_membership(db, trip_id, caller.id) is not None:
        db.rollback()
        raise AlreadyMember()

    db.add(
        TripMember(
            trip_id=trip_id,
            user_id=caller.id,
            role=invitation.role,
            invited_by_id=invitation.invited_by_id,
        )
    )
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise AlreadyMember() from None

    db.commit()
    logger.info("User %s joined trip %s via invitation", caller.id, trip_id)
    return trip_id


def list_invitations(
    db: Session,
    trip_id: int,
    caller: User,
    *,
    now: datetime | None = None,
) -> list[TripInvitation]:
    authorize(db, trip_id, caller, MUTATING_ROLES)
    stmt = (
        select(TripInvitation)
        .where(TripInvitation.trip_id == trip_id)
        .order_by(TripInvitation.invited_at.desc(), TripInvitation.id.desc())
    )
    invitations = list(db.scalars(stmt).all())
    if _expire_stale(db, invitations, now or datetime.now(UTC)):
        db.commit()
        invitations = list(db.scalars(stmt).all())
    return invitations
