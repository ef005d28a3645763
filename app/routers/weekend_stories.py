"""Weekend story routes: same ownership contract as standups."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from app.db.storage import Storage, get_storage
from app.models.user import User
from app.routers.auth import get_current_user
from app.schemas.weekend_story import (
    WeekendStoryInSchema,
    WeekendStoryOutSchema,
    WeekendStoryWithUsernameSchema,
)
from app.services.ownership import ensure_owner

router = APIRouter(prefix="/api/weekend-stories", tags=["weekend-stories"])


@router.post("", response_model=WeekendStoryOutSchema, status_code=201)
async def create_weekend_story(
    body: WeekendStoryInSchema,
    storage: Annotated[Storage, Depends(get_storage)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    return await storage.create_weekend_story(current_user.id, body.description, body.images)


@router.get("", response_model=list[WeekendStoryWithUsernameSchema])
async def list_weekend_stories(
    storage: Annotated[Storage, Depends(get_storage)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    return await storage.list_weekend_stories()


@router.get("/{story_id}", response_model=WeekendStoryOutSchema)
async def get_weekend_story(
    story_id: int,
    storage: Annotated[Storage, Depends(get_storage)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    story = await storage.get_weekend_story(story_id)
    if story is None:
        raise HTTPException(status_code=404, detail="Weekend story not found")
    return story


@router.put("/{story_id}", response_model=WeekendStoryOutSchema)
async def update_weekend_story(
    story_id: int,
    body: WeekendStoryInSchema,
    storage: Annotated[Storage, Depends(get_storage)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    ensure_owner(
        await storage.get_weekend_story(story_id),
        current_user.id,
        resource="weekend story",
        plural="weekend stories",
        action="edit",
    )
    try:
        return await storage.update_weekend_story(story_id, current_user.id, body.description, body.images)
    except LookupError:
        # deleted between the ownership check and the write
        raise HTTPException(status_code=404, detail="Weekend story not found")


@router.delete("/{story_id}", status_code=204)
async def delete_weekend_story(
    story_id: int,
    storage: Annotated[Storage, Depends(get_storage)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    ensure_owner(
        await storage.get_weekend_story(story_id),
        current_user.id,
        resource="weekend story",
        plural="weekend stories",
        action="delete",
    )
    try:
        await storage.delete_weekend_story(story_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Weekend story not found")
