"""SQLAlchemy declarative base and model imports for Alembic."""
from app.db.session import Base

# Import all models so Alembic can see them
from app.models.standup import Standup  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.weekend_story import WeekendStory  # noqa: F401

__all__ = ["Base", "User", "Standup", "WeekendStory"]
