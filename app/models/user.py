"""User model: identity plus the global progression counters."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.core.timeutils import utcnow
from app.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(64), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    avatar = Column(String(512), nullable=True)

    experience = Column(Integer, nullable=False, default=0)  # never decreases
    level = Column(Integer, nullable=False, default=1)  # experience // 100 + 1
    streak = Column(Integer, nullable=False, default=0)  # consecutive login days
    last_login = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=True)
    # bumped on every UPDATE; concurrent writers of the same user fail instead of losing updates
    version_id = Column(Integer, nullable=False, default=1)

    enrollments = relationship("Enrollment", back_populates="user")
    progress = relationship("Progress", back_populates="user")
    achievements = relationship("Achievement", back_populates="user", order_by="Achievement.unlocked_at")
    sessions = relationship("AuthSession", back_populates="user")

    __mapper_args__ = {"version_id_col": version_id}
