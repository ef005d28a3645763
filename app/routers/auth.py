"""Auth routes: register, login, logout, current user, profile and avatar updates.

Session-based auth via a signed cookie carrying the user id.
"""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from app.core.config import Settings
from app.core.security import (
    hash_password,
    verify_password,
    create_session_token,
    verify_session_token,
)
from app.db.storage import Storage, get_storage
from app.models.user import User
from app.schemas.user import (
    AvatarUploadSchema,
    LoginSchema,
    RegisterSchema,
    UserOutSchema,
    UserUpdateSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user_optional(
    request: Request,
    storage: Annotated[Storage, Depends(get_storage)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> User | None:
    """Return current user if auth cookie is valid; else None."""
    token = request.cookies.get(settings.auth_cookie_name)
    if not token:
        return None

    user_id = verify_session_token(token, settings)
    if user_id is None:
        return None

    return await storage.get_user(user_id)


async def get_current_user(
    current_user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    if current_user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return current_user


def _set_auth_cookie(response: Response, user: User, settings: Settings) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=create_session_token(user.id, settings),
        max_age=settings.auth_cookie_max_age,
        httponly=True,
        samesite="lax",
        path="/",
    )


@router.post("/register", response_model=UserOutSchema, status_code=201)
async def register(
    body: RegisterSchema,
    response: Response,
    storage: Annotated[Storage, Depends(get_storage)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Create user and log them in."""
    if await storage.get_user_by_username(body.username):
        raise HTTPException(status_code=400, detail="Username already exists")

    user = await storage.create_user(
        username=body.username,
        hashed_password=hash_password(body.password),
        first_name=body.first_name,
        last_name=body.last_name,
    )
    _set_auth_cookie(response, user, settings)
    return user


@router.post("/login", response_model=UserOutSchema)
async def login(
    body: LoginSchema,
    response: Response,
    storage: Annotated[Storage, Depends(get_storage)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Check credentials and set the auth cookie."""
    user = await storage.get_user_by_username(body.username.strip())
    if not user or not verify_password(body.password, user.hashed_password):
        logger.info("Failed login for username=%s", body.username)
        raise HTTPException(status_code=401, detail="Invalid username or password")

    _set_auth_cookie(response, user, settings)
    return user


@router.post("/logout", status_code=204)
async def logout(
    response: Response,
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Clear auth cookie."""
    # path must match set_cookie()
    response.delete_cookie(settings.auth_cookie_name, path="/")


@router.get("/user", response_model=UserOutSchema)
async def read_user(current_user: Annotated[User, Depends(get_current_user)]):
    return current_user


@router.put("/user", response_model=UserOutSchema)
async def update_user(
    body: UserUpdateSchema,
    storage: Annotated[Storage, Depends(get_storage)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Update the caller's own profile; the password is re-hashed."""
    changes = body.model_dump(exclude_unset=True, exclude={"password"})
    if body.username and body.username != current_user.username:
        if await storage.get_user_by_username(body.username):
            raise HTTPException(status_code=400, detail="Username already exists")
    elif "username" in changes:
        # blank or unchanged username: keep the stored one
        changes.pop("username")
    if body.password:
        changes["hashed_password"] = hash_password(body.password)

    return await storage.update_user(current_user.id, **changes)


@router.post("/user/avatar", response_model=UserOutSchema)
async def upload_avatar(
    body: AvatarUploadSchema,
    storage: Annotated[Storage, Depends(get_storage)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Store an uploaded image (base64 data URL) as the caller's avatar."""
    return await storage.update_user(current_user.id, avatar_url=body.avatar)
