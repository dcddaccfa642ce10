import hashlib
import secrets
from functools import lru_cache

import jwt

from tripmates.core.config import Settings
from tripmates.core.errors import Unauthenticated
from tripmates.schemas.users import VerifiedIdentity


def generate_raw_token(nbytes: int = 32) -> str:
    return secrets.token_urlsafe(nbytes)


def hash_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def normalize_email(value: str) -> str:
    return value.strip().lower()


@lru_cache
def _jwks_client(jwks_url: str) -> jwt.PyJWKClient:
    return jwt.PyJWKClient(jwks_url, cache_keys=True)


def _signing_key(token: str, settings: Settings):
    if settings.identity_jwks_url:
        return _jwks_client(settings.identity_jwks_url).get_signing_key_from_jwt(
            token
        ).key
    if settings.identity_shared_secret:
        return settings.identity_shared_secret
    raise Unauthenticated("Identity provider is not configured")


def decode_identity_token(token: str, settings: Settings) -> dict:
    algorithms = settings.identity_algorithms
    if not settings.identity_jwks_url:
        algorithms = ["HS256"]

    options = {"require": ["sub", "exp"]}
    if not settings.identity_audience:
        options["verify_aud"] = False

    try:
        return jwt.decode(
            token,
            _signing_key(token, settings),
            algorithms=algorithms,
            audience=settings.identity_audience,
            issuer=settings.identity_issuer,
            options=options,
        )
    except jwt.ExpiredSignatureError as exc:
        raise Unauthenticated("Session expired") from exc
    except jwt.PyJWTError as exc:
        raise Unauthenticated("Invalid identity token") from exc


def verify_identity_token(token: str, settings: Settings) -> VerifiedIdentity:
    claims = decode_identity_token(token, settings)

    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        raise Unauthenticated("Invalid token payload")

    email = claims.get("email")
    if not isinstance(email, str) or claims.get("email_verified") is False:
        email = None

    name = claims.get("name")
    if not isinstance(name, str) or not name.strip():
        name = None

    return VerifiedIdentity(
        subject=subject.strip(),
        name=name.strip() if name else None,
        email=normalize_email(email) if email else None,
    )
