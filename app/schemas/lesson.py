"""Pydantic schemas for lessons and exercises. Correct answers never leave the server."""
from pydantic import BaseModel, ConfigDict

from app.schemas.progress import ProgressOut


class ExerciseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    question: str
    options: list[str] | None = None
    order: int
    points: int


class LanguageRefSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code: str


class LessonSummaryOut(BaseModel):
    id: int
    title: str
    description: str | None = None
    order: int
    difficulty: str
    exercise_count: int


class LessonDetailOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    order: int
    difficulty: str
    language: LanguageRefSchema
    exercises: list[ExerciseOut]


class LessonWithProgressOut(LessonDetailOut):
    user_progress: ProgressOut | None = None
    is_unlocked: bool = True


class NextLessonOut(BaseModel):
    next_lesson: LessonSummaryOut | None
