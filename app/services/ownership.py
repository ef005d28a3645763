"""Ownership policy for standups and weekend stories."""
from typing import Protocol, TypeVar

from fastapi import HTTPException


class Owned(Protocol):
    user_id: int


T = TypeVar("T", bound=Owned)


def owns(entity: Owned, actor_id: int) -> bool:
    """True when actor_id created the entity."""
    return entity.user_id == actor_id


def ensure_owner(
    entity: T | None, actor_id: int, *, resource: str, action: str, plural: str | None = None
) -> T:
    """Return entity if actor_id owns it; 404 when missing, 403 when someone else's."""
    if entity is None:
        raise HTTPException(status_code=404, detail=f"{resource.capitalize()} not found")
    if not owns(entity, actor_id):
        plural = plural or f"{resource}s"
        raise HTTPException(status_code=403, detail=f"You can only {action} your own {plural}")
    return entity
