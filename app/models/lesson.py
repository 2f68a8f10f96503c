"""Lesson and Exercise models. A lesson's possible score is the sum of its active exercise points."""
from sqlalchemy import JSON, Boolean, CheckConstraint, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.session import Base


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True, autoincrement=True)
    language_id = Column(Integer, ForeignKey("languages.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0)
    difficulty = Column(String(32), nullable=False, default="beginner")  # beginner | intermediate | advanced
    is_active = Column(Boolean, nullable=False, default=True)

    language = relationship("Language", back_populates="lessons")
    exercises = relationship("Exercise", back_populates="lesson", order_by="Exercise.order")
    progress = relationship("Progress", back_populates="lesson")


class Exercise(Base):
    __tablename__ = "exercises"
    __table_args__ = (CheckConstraint("points > 0", name="ck_exercises_points_positive"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id"), nullable=False, index=True)
    type = Column(String(32), nullable=False)  # multiple_choice | fill_blank | translation
    question = Column(Text, nullable=False)
    correct_answer = Column(Text, nullable=False)
    options = Column(JSON, nullable=True)  # list of strings for multiple_choice
    explanation = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0)
    points = Column(Integer, nullable=False, default=10)
    is_active = Column(Boolean, nullable=False, default=True)

    lesson = relationship("Lesson", back_populates="exercises")
