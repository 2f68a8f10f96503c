"""Language model: a track users can enroll in."""
from sqlalchemy import Boolean, Column, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.session import Base


class Language(Base):
    __tablename__ = "languages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), nullable=False)
    code = Column(String(8), unique=True, nullable=False, index=True)  # es, fr, de ...
    flag = Column(String(16), nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    lessons = relationship("Lesson", back_populates="language", order_by="Lesson.order")
    enrollments = relationship("Enrollment", back_populates="language")
