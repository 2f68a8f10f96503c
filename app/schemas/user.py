"""Pydantic schemas for the resolved user and profile endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from app.schemas.achievement import AchievementOut


class UserOut(BaseModel):
    """Identity handed to handlers by the auth gateway."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str
    level: int
    experience: int
    streak: int
    avatar: str | None = None


class ProfileOut(UserOut):
    first_name: str | None = None
    last_name: str | None = None
    last_login: datetime | None = None
    created_at: datetime | None = None


class ProfileUpdateSchema(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)
    avatar: HttpUrl | None = None


class UserStatsOut(BaseModel):
    total_languages: int
    total_lessons: int
    completed_lessons: int
    completion_rate: float
    total_score: int
    total_time_spent: int
    total_achievements: int
    achievements: list[AchievementOut]  # latest five
