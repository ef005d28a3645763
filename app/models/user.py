"""User model: login identity plus optional profile fields."""
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    jira_profile_id = Column(String(255), nullable=True)  # external profile reference
    avatar_url = Column(Text, nullable=True)  # URL or base64 data URL
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    standups = relationship("Standup", back_populates="user")
    weekend_stories = relationship("WeekendStory", back_populates="user")
