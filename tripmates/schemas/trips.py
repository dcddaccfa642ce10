from datetime import date, datetime
from enum import StrEnum
from typing import ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

from tripmates.schemas.common import PartialUpdate
from tripmates.schemas.users import UserSummary


class TripRole(StrEnum):
    owner = "owner"
    editor = "editor"
    viewer = "viewer"


class InvitationStatus(StrEnum):
    pending = "pending"
    accepted = "accepted"
    expired = "expired"


ANY_ROLE = frozenset(TripRole)
MUTATING_ROLES = frozenset({TripRole.owner, TripRole.editor})
INVITABLE_ROLES = frozenset({TripRole.editor, TripRole.viewer})


class TripCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    destination: str = Field(min_length=1, max_length=200)
    start_date: date
    end_date: date
    description: str | None = None

    @model_validator(mode="after")
    def _validate_dates(self) -> "TripCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TripUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset[str]] = frozenset(
        {"title", "destination", "start_date", "end_date"}
    )

    title: str | None = Field(default=None, min_length=1, max_length=200)
    destination: str | None = Field(default=None, min_length=1, max_length=200)
    start_date: date | None = None
    end_date: date | None = None
    description: str | None = None


class TripOut(BaseModel):
    id: int
    title: str
    destination: str
    start_date: date
    end_date: date
    description: str | None
    created_by_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MemberOut(BaseModel):
    id: int
    trip_id: int
    role: TripRole
    joined_at: datetime
    user: UserSummary
    inviter: UserSummary

    model_config = ConfigDict(from_attributes=True)


class InviteIn(BaseModel):
    email: EmailStr
    role: TripRole = TripRole.viewer

    @field_validator("role")
    @classmethod
    def _validate_role(cls, value: TripRole) -> TripRole:
        if value not in INVITABLE_ROLES:
            raise ValueError("Invitations can only grant the editor or viewer role")
        return value


class InvitationOut(BaseModel):
    id: int
    trip_id: int
    email: str
    role: TripRole
    status: InvitationStatus
    invited_by_id: int
    invited_at: datetime
    expires_at: datetime
    responded_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class InvitationTokenIn(BaseModel):
    token: SecretStr


class InvitationPreviewOut(BaseModel):
    trip_id: int
    trip_title: str
    email: str
    role: TripRole
    expires_at: datetime


class InvitationAcceptOut(BaseModel):
    trip_id: int
