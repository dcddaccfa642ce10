from datetime import datetime

from pydantic import BaseModel, ConfigDict


class VerifiedIdentity(BaseModel):
    """Claims taken from an identity token whose signature has been checked."""

    subject: str
    name: str | None = None
    email: str | None = None


class UserSummary(BaseModel):
    id: int
    name: str | None
    email: str | None

    model_config = ConfigDict(from_attributes=True)


class UserOut(UserSummary):
    subject: str
    created_at: datetime
