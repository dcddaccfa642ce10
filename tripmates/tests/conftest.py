import os
from collections.abc import Generator
from datetime import UTC, date, datetime, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault(
    "IDENTITY_SHARED_SECRET", "tripmates-test-identity-secret-0123456789"
)
os.environ.setdefault("INVITE_BASE_URL", "https://frontend.local/invite")

import jwt  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import StaticPool, create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

import tripmates.models  # noqa: E402,F401
from tripmates.core.config import get_settings  # noqa: E402
from tripmates.core.database import (  # noqa: E402
    Base,
    enable_sqlite_foreign_keys,
    get_db,
)
from tripmates.main import app  # noqa: E402
from tripmates.models.trips import Trip, TripMember  # noqa: E402
from tripmates.models.users import User  # noqa: E402
from tripmates.schemas.trips import TripCreate, TripRole  # noqa: E402
from tripmates.services import trip_service  # noqa: E402


def make_identity_token(
    subject: str,
    email: str | None = None,
    name: str | None = None,
    *,
    email_verified: bool = True,
    expires_in: timedelta = timedelta(minutes=10),
    secret: str | None = None,
    **extra,
) -> str:
    now = datetime.now(UTC)
    claims = {
        "sub": subject,
        "iat": now,
        "exp": now + expires_in,
        "email_verified": email_verified,
        **extra,
    }
    if email is not None:
        claims["email"] = email
    if name is not None:
        claims["name"] = name
    key = secret or get_settings().identity_shared_secret
    return jwt.encode(claims, key, algorithm="HS256")


@pytest.fixture
def engine():
    # Fresh database per test.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session]:
    TestingSessionLocal = sessionmaker(
        bind=engine, autoflush=False, expire_on_commit=False, future=True
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session) -> Generator[TestClient]:
    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make(
        email: str | None = "owner@example.com",
        name: str | None = None,
        subject: str | None = None,
    ) -> User:
        user = User(subject=subject or f"idp|{email}", name=name, email=email)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict[str, str]:
        token = make_identity_token(user.subject, email=user.email, name=user.name)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def make_trip(db_session):
    def _make(owner: User, **overrides) -> Trip:
        fields = {
            "title": "Lisbon with the family",
            "destination": "Lisbon",
            "start_date": date(2026, 7, 1),
            "end_date": date(2026, 7, 10),
        }
        fields.update(overrides)
        return trip_service.create_trip(db_session, owner, TripCreate(**fields))

    return _make


@pytest.fixture
def add_member(db_session):
    def _add(trip: Trip, user: User, role: TripRole, inviter: User) -> TripMember:
        membership = TripMember(
            trip_id=trip.id,
            user_id=user.id,
            role=role,
            invited_by_id=inviter.id,
        )
        db_session.add(membership)
        db_session.commit()
        db_session.refresh(membership)
        return membership

    return _add


@pytest.fixture
def identity_token():
    return make_identity_token
