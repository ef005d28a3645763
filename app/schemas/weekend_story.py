"""Pydantic schemas for weekend stories."""
from datetime import datetime

from pydantic import Field, field_validator

from app.schemas.base import ApiModel


class WeekendStoryInSchema(ApiModel):
    description: str = Field(..., min_length=1)
    images: list[str] | None = None

    @field_validator("images")
    @classmethod
    def none_to_empty(cls, v: list[str] | None) -> list[str]:
        return v or []


class WeekendStoryOutSchema(ApiModel):
    id: int
    user_id: int
    description: str
    images: list[str] = []
    created_at: datetime

    @field_validator("images", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or []


class WeekendStoryWithUsernameSchema(WeekendStoryOutSchema):
    username: str
