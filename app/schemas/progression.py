"""Pydantic schemas for progression state transitions and lesson completion."""
from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.achievement import AchievementUnlock
from app.schemas.progress import ProgressOut


class ExperienceGain(BaseModel):
    experience_gained: int
    new_experience: int
    new_level: int
    leveled_up: bool


class StreakUpdate(BaseModel):
    streak: int
    last_login: datetime | None
    changed: bool


class LessonCompleteSchema(BaseModel):
    score: int = Field(ge=0)
    time_spent: int = Field(default=0, ge=0)  # seconds


class LessonCompletionOut(BaseModel):
    message: str = "Lesson completed successfully"
    final_score: int
    total_points: int
    experience_gained: int
    new_experience: int
    new_level: int
    leveled_up: bool
    unlocked_achievements: list[AchievementUnlock]
    progress: ProgressOut


class StreakOut(BaseModel):
    streak: int
    last_login: datetime | None
