"""WeekendStory model: free text plus image links.

Storage columns are ``story`` and ``image_urls``; the mapped attributes (and the API)
use ``description`` and ``images``.
"""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from app.db.session import Base
from app.models.standup import utcnow


class WeekendStory(Base):
    __tablename__ = "weekend_stories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    description = Column("story", Text, nullable=False)
    images = Column("image_urls", JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    user = relationship("User", back_populates="weekend_stories")
