"""Pydantic schemas for lesson progress and aggregated learning stats."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ProgressOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    lesson_id: int
    score: int
    time_spent: int
    completed: bool
    completed_at: datetime | None = None


class LanguageBriefSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code: str
    flag: str | None = None


class ProgressStatisticsSchema(BaseModel):
    total_lessons: int
    completed_lessons: int
    completion_rate: float
    total_score: int
    total_time: int


class LanguageOverviewSchema(ProgressStatisticsSchema):
    language: LanguageBriefSchema
    level: int
    started_at: datetime


class ProgressOverviewOut(BaseModel):
    overview: list[LanguageOverviewSchema]


class LessonProgressRowSchema(BaseModel):
    id: int
    title: str
    description: str | None = None
    order: int
    difficulty: str
    progress: ProgressOut | None = None
    is_completed: bool


class LanguageProgressOut(BaseModel):
    language_id: int
    level: int
    lessons: list[LessonProgressRowSchema]
    statistics: ProgressStatisticsSchema


class LessonProgressOut(BaseModel):
    progress: ProgressOut | None
    lesson_title: str | None = None
    language_name: str | None = None
    message: str | None = None


class DailyProgressSchema(BaseModel):
    lessons_completed: int = 0
    total_score: int = 0
    total_time: int = 0


class AnalyticsOut(BaseModel):
    period: str
    total_lessons_completed: int
    average_score: int
    average_time_per_lesson: int
    daily_progress: dict[str, DailyProgressSchema]
    learning_streak: int
