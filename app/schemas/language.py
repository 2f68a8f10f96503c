"""Pydantic schemas for languages and enrollments."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class LanguageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code: str
    flag: str | None = None
    description: str | None = None


class LessonBriefSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    order: int
    difficulty: str


class LanguageDetailOut(LanguageOut):
    lessons: list[LessonBriefSchema]


class EnrollmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    language_id: int
    level: int
    is_active: bool
    started_at: datetime


class EnrollResultOut(BaseModel):
    message: str
    enrollment: EnrollmentOut


class EnrollmentWithProgressOut(EnrollmentOut):
    language: LanguageOut
    total_lessons: int
    completed_lessons: int
    progress_percentage: int
