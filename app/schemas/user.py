"""Pydantic schemas for registration, login and profile updates."""
import base64
import binascii
import re
from datetime import datetime

from pydantic import Field, field_validator

from app.core.security import MAX_PASSWORD_BYTES
from app.schemas.base import ApiModel

MIN_PASSWORD_LENGTH = 8
MAX_AVATAR_BYTES = 5 * 1024 * 1024

_DATA_URL_RE = re.compile(r"^data:(image/[\w.+-]+);base64,(.+)$", re.DOTALL)


def _check_password(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterSchema(ApiModel):
    username: str = Field(..., min_length=1, max_length=255)
    password: str
    first_name: str | None = None
    last_name: str | None = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username must not be blank")
        return v

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _check_password(v)


class LoginSchema(ApiModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserUpdateSchema(ApiModel):
    """Self-service profile update; every field optional, absent means unchanged."""

    username: str | None = Field(None, max_length=255)
    password: str | None = None
    jira_profile_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str | None) -> str | None:
        if not v:
            return None
        return _check_password(v)


class AvatarUploadSchema(ApiModel):
    """Avatar as a base64 ``data:image/...`` URL, stored as-is on the profile."""

    avatar: str

    @field_validator("avatar")
    @classmethod
    def image_data_url(cls, v: str) -> str:
        match = _DATA_URL_RE.match(v.strip())
        if not match:
            raise ValueError("Avatar must be a base64 image data URL")
        try:
            raw = base64.b64decode(match.group(2), validate=True)
        except binascii.Error:
            raise ValueError("Avatar is not valid base64")
        if len(raw) > MAX_AVATAR_BYTES:
            raise ValueError("Avatar must be smaller than 5MB")
        return v.strip()


class UserOutSchema(ApiModel):
    id: int
    username: str
    first_name: str | None = None
    last_name: str | None = None
    jira_profile_id: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None
