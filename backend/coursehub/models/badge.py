"""Read-only achievement shown on the student dashboard."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from coursehub.database import Base


class Badge(Base):
    __tablename__ = "badges"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    badge_type = Column(String(100), nullable=False)  # e.g. "first_course", "week_streak"
    earned_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    student = relationship("Profile", back_populates="badges")
