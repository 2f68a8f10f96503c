"""Enrollment model: one row per (user, language); soft-deactivated on unenroll."""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.core.timeutils import utcnow
from app.db.session import Base


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("user_id", "language_id", name="uq_enrollments_user_language"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    language_id = Column(Integer, ForeignKey("languages.id"), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    level = Column(Integer, nullable=False, default=1)  # per language, independent of users.level
    started_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="enrollments")
    language = relationship("Language", back_populates="enrollments")
    progress = relationship("Progress", back_populates="enrollment")
