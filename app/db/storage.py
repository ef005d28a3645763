"""Persistence layer: one Storage per request session, one method per operation.

Every SQLAlchemy failure leaves as StorageError so handlers never leak driver
detail. Updates and deletes on an absent id raise LookupError; callers are
expected to have loaded the row first.
"""
import functools
import logging
from typing import Annotated, Any

from fastapi import Depends
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import StorageError
from app.db.session import get_db
from app.models.standup import Standup
from app.models.user import User
from app.models.weekend_story import WeekendStory
from app.schemas.standup import StandupOutSchema, StandupWithUsernameSchema
from app.schemas.weekend_story import WeekendStoryOutSchema, WeekendStoryWithUsernameSchema

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown User"

# ids beyond a signed 64-bit INTEGER can never match a row
MAX_ROW_ID = 2**63 - 1

USER_FIELDS = ("username", "hashed_password", "first_name", "last_name", "jira_profile_id", "avatar_url")
STANDUP_FIELDS = ("yesterday", "today", "blockers", "highlights", "standup_date")


def _valid_id(row_id: int) -> bool:
    return 0 < row_id <= MAX_ROW_ID


def _guarded(method):
    """Roll back and re-raise SQLAlchemy errors as StorageError."""

    @functools.wraps(method)
    async def wrapper(self: "Storage", *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise StorageError(f"{method.__name__} failed") from exc

    return wrapper


class Storage:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------- users ----------

    @_guarded
    async def get_user(self, user_id: int) -> User | None:
        if not _valid_id(user_id):
            return None
        return await self.db.get(User, user_id)

    @_guarded
    async def get_user_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    @_guarded
    async def create_user(self, **fields: Any) -> User:
        user = User(**{k: v for k, v in fields.items() if k in USER_FIELDS})
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("Created user id=%s username=%s", user.id, user.username)
        return user

    @_guarded
    async def update_user(self, user_id: int, **fields: Any) -> User:
        """Partial update: only the given profile fields change."""
        user = await self.db.get(User, user_id)
        if user is None:
            raise LookupError(f"user {user_id} does not exist")
        for key, value in fields.items():
            if key in USER_FIELDS:
                setattr(user, key, value)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    # ---------- standups ----------

    @_guarded
    async def create_standup(self, user_id: int, **fields: Any) -> Standup:
        values = {k: v for k, v in fields.items() if k in STANDUP_FIELDS}
        # absent date falls back to the column default (today)
        if values.get("standup_date") is None:
            values.pop("standup_date", None)
        standup = Standup(user_id=user_id, **values)
        self.db.add(standup)
        await self.db.commit()
        await self.db.refresh(standup)
        return standup

    @_guarded
    async def get_standup(self, standup_id: int) -> Standup | None:
        if not _valid_id(standup_id):
            return None
        return await self.db.get(Standup, standup_id)

    @_guarded
    async def update_standup(self, standup_id: int, user_id: int, **fields: Any) -> Standup:
        """Replace yesterday/today/blockers/highlights; keep standup_date unless given."""
        standup = await self.db.get(Standup, standup_id)
        if standup is None:
            raise LookupError(f"standup {standup_id} does not exist")
        standup.user_id = user_id
        standup.yesterday = fields["yesterday"]
        standup.today = fields["today"]
        standup.blockers = fields.get("blockers")
        standup.highlights = fields.get("highlights")
        if fields.get("standup_date") is not None:
            standup.standup_date = fields["standup_date"]
        await self.db.commit()
        await self.db.refresh(standup)
        return standup

    @_guarded
    async def delete_standup(self, standup_id: int) -> None:
        result = await self.db.execute(delete(Standup).where(Standup.id == standup_id))
        if result.rowcount == 0:
            await self.db.rollback()
            raise LookupError(f"standup {standup_id} does not exist")
        await self.db.commit()

    @_guarded
    async def list_standups(self) -> list[StandupWithUsernameSchema]:
        """All standups, newest first, each labelled with its author's username."""
        stmt = (
            select(Standup, User.username)
            .outerjoin(User, Standup.user_id == User.id)
            .order_by(Standup.created_at.desc(), Standup.id.desc())
        )
        rows = (await self.db.execute(stmt)).all()
        return [
            StandupWithUsernameSchema(
                **StandupOutSchema.model_validate(standup).model_dump(),
                username=username or UNKNOWN_AUTHOR,
            )
            for standup, username in rows
        ]

    # ---------- weekend stories ----------

    @_guarded
    async def create_weekend_story(self, user_id: int, description: str, images: list[str] | None = None) -> WeekendStory:
        story = WeekendStory(user_id=user_id, description=description, images=list(images or []))
        self.db.add(story)
        await self.db.commit()
        await self.db.refresh(story)
        return story

    @_guarded
    async def get_weekend_story(self, story_id: int) -> WeekendStory | None:
        if not _valid_id(story_id):
            return None
        return await self.db.get(WeekendStory, story_id)

    @_guarded
    async def update_weekend_story(
        self, story_id: int, user_id: int, description: str, images: list[str] | None = None
    ) -> WeekendStory:
        story = await self.db.get(WeekendStory, story_id)
        if story is None:
            raise LookupError(f"weekend story {story_id} does not exist")
        story.user_id = user_id
        story.description = description
        story.images = list(images or [])
        await self.db.commit()
        await self.db.refresh(story)
        return story

    @_guarded
    async def delete_weekend_story(self, story_id: int) -> None:
        result = await self.db.execute(delete(WeekendStory).where(WeekendStory.id == story_id))
        if result.rowcount == 0:
            await self.db.rollback()
            raise LookupError(f"weekend story {story_id} does not exist")
        await self.db.commit()

    @_guarded
    async def list_weekend_stories(self) -> list[WeekendStoryWithUsernameSchema]:
        stmt = (
            select(WeekendStory, User.username)
            .outerjoin(User, WeekendStory.user_id == User.id)
            .order_by(WeekendStory.created_at.desc(), WeekendStory.id.desc())
        )
        rows = (await self.db.execute(stmt)).all()
        return [
            WeekendStoryWithUsernameSchema(
                **WeekendStoryOutSchema.model_validate(story).model_dump(),
                username=username or UNKNOWN_AUTHOR,
            )
            for story, username in rows
        ]


def get_storage(db: Annotated[AsyncSession, Depends(get_db)]) -> Storage:
    return Storage(db)

