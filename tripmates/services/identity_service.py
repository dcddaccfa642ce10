import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tripmates.models.users import User
from tripmates.schemas.users import VerifiedIdentity

logger = logging.getLogger(__name__)


def get_user_by_subject(db: Session, subject: str) -> User | None:
    return db.scalars(select(User).where(User.subject == subject)).first()


def _refresh_profile(db: Session, user: User, identity: VerifiedIdentity) -> User:
    changed = False
    if identity.name and identity.name != user.name:
        user.name = identity.name
        changed = True
    if identity.email and identity.email != user.email:
        user.email = identity.email
        changed = True
    if changed:
        db.commit()
        db.refresh(user)
    return user


def resolve_user(db: Session, identity: VerifiedIdentity) -> User:
    """
    Return the user bound to ``identity.subject``, creating it on first sight.

    Two first requests from the same subject can race; the unique constraint
    on ``users.subject`` lets exactly one insert through and the loser reads
    the winner's row.
    """
    user = get_user_by_subject(db, identity.subject)
    if user:
        return _refresh_profile(db, user, identity)

    user = User(subject=identity.subject, name=identity.name, email=identity.email)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        user = get_user_by_subject(db, identity.subject)
        if user is None:
            raise
        return _refresh_profile(db, user, identity)

    db.refresh(user)
    logger.info("Created user %s for subject %s", user.id, identity.subject)
    return user
