"""Pydantic schemas for achievements: unlock events, stored badges, next targets."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AchievementUnlock(BaseModel):
    """An achievement the progression rules decided to grant; persisted once per (user, type, referent)."""

    type: str
    referent: str
    title: str
    description: str
    icon: str


class AchievementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    title: str
    description: str | None = None
    icon: str | None = None
    unlocked_at: datetime


class AchievementListOut(BaseModel):
    achievements: list[AchievementOut]
    grouped_achievements: dict[str, list[AchievementOut]]
    total_count: int


class AchievementStatsOut(BaseModel):
    total_achievements: int
    type_counts: dict[str, int]
    recent_achievements: int  # unlocked in the last 7 days
    achievement_rate: float  # per-month average


class AvailableAchievementSchema(BaseModel):
    type: str
    title: str
    description: str
    icon: str
    progress: int
    target: int
    progress_percentage: float


class LeaderboardEntrySchema(BaseModel):
    rank: int
    username: str
    level: int
    experience: int
    streak: int
    achievement_count: int
    is_current_user: bool = False
