from fastapi import Depends, Request
from sqlalchemy.orm import Session

from tripmates.core.config import Settings, get_settings
from tripmates.core.database import get_db
from tripmates.core.errors import Unauthenticated
from tripmates.core.security import verify_identity_token
from tripmates.models.users import User
from tripmates.schemas.users import VerifiedIdentity
from tripmates.services.identity_service import resolve_user


def _extract_bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    scheme, _, param = auth_header.strip().partition(" ")
    if scheme.lower() != "bearer" or not param:
        raise Unauthenticated("Invalid authorization header")
    return param.strip()


def get_identity(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> VerifiedIdentity:
    token = _extract_bearer_token(request)
    if not token:
        raise Unauthenticated("Not authenticated")
    return verify_identity_token(token, settings)


def get_current_user(
    identity: VerifiedIdentity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> User:
    return resolve_user(db, identity)
