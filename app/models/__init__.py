from app.models.user import User
from app.models.standup import Standup
from app.models.weekend_story import WeekendStory

__all__ = ["User", "Standup", "WeekendStory"]
