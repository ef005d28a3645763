"""Pydantic schemas for standups."""
from datetime import date, datetime

from pydantic import Field, field_validator

from app.schemas.base import ApiModel


class StandupInSchema(ApiModel):
    """Create/update body. userId is never read from the client."""

    yesterday: str = Field(..., min_length=1)
    today: str = Field(..., min_length=1)
    blockers: str | None = None
    highlights: str | None = None
    standup_date: date | None = None

    @field_validator("blockers", "highlights")
    @classmethod
    def empty_to_none(cls, v: str | None) -> str | None:
        return v or None


class StandupOutSchema(ApiModel):
    id: int
    user_id: int
    yesterday: str
    today: str
    blockers: str | None = None
    highlights: str | None = None
    standup_date: date
    created_at: datetime


class StandupWithUsernameSchema(StandupOutSchema):
    username: str
