"""Achievement model: an immutable badge, unique per (user, type, referent)."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.core.timeutils import utcnow
from app.db.session import Base


class Achievement(Base):
    __tablename__ = "achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "type", "referent", name="uq_achievements_user_type_referent"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(32), nullable=False)  # level_up | perfect_score | streak | lesson_complete
    # stable identity of what was achieved, e.g. "lesson:12" or "level:3"; the title is display only
    referent = Column(String(64), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(16), nullable=True)
    unlocked_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="achievements")
