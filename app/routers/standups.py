"""Standup routes: create, list, get, update, delete."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from app.db.storage import Storage, get_storage
from app.models.user import User
from app.routers.auth import get_current_user
from app.schemas.standup import StandupInSchema, StandupOutSchema, StandupWithUsernameSchema
from app.services.ownership import ensure_owner

router = APIRouter(prefix="/api/standups", tags=["standups"])


@router.post("", response_model=StandupOutSchema, status_code=201)
async def create_standup(
    body: StandupInSchema,
    storage: Annotated[Storage, Depends(get_storage)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Create a standup attributed to the caller."""
    return await storage.create_standup(current_user.id, **body.model_dump())


@router.get("", response_model=list[StandupWithUsernameSchema])
async def list_standups(
    storage: Annotated[Storage, Depends(get_storage)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Everyone's standups, newest first."""
    return await storage.list_standups()


@router.get("/{standup_id}", response_model=StandupOutSchema)
async def get_standup(
    standup_id: int,
    storage: Annotated[Storage, Depends(get_storage)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    standup = await storage.get_standup(standup_id)
    if standup is None:
        raise HTTPException(status_code=404, detail="Standup not found")
    return standup


@router.put("/{standup_id}", response_model=StandupOutSchema)
async def update_standup(
    standup_id: int,
    body: StandupInSchema,
    storage: Annotated[Storage, Depends(get_storage)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Replace the caller's own standup."""
    ensure_owner(await storage.get_standup(standup_id), current_user.id, resource="standup", action="edit")
    try:
        return await storage.update_standup(standup_id, current_user.id, **body.model_dump())
    except LookupError:
        # deleted between the ownership check and the write
        raise HTTPException(status_code=404, detail="Standup not found")


@router.delete("/{standup_id}", status_code=204)
async def delete_standup(
    standup_id: int,
    storage: Annotated[Storage, Depends(get_storage)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    ensure_owner(await storage.get_standup(standup_id), current_user.id, resource="standup", action="delete")
    try:
        await storage.delete_standup(standup_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Standup not found")
