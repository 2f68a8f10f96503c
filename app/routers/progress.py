"""Progress routes: overview, per-language, per-lesson, 30-day analytics."""
from collections import defaultdict
from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import NotEnrolled
from app.core.timeutils import as_utc, utcnow
from app.db.session import get_db
from app.models.enrollment import Enrollment
from app.models.lesson import Lesson
from app.models.progress import Progress
from app.routers.auth import CurrentUser
from app.schemas.progress import (
    AnalyticsOut,
    DailyProgressSchema,
    LanguageBriefSchema,
    LanguageOverviewSchema,
    LanguageProgressOut,
    LessonProgressOut,
    LessonProgressRowSchema,
    ProgressOut,
    ProgressOverviewOut,
    ProgressStatisticsSchema,
)
from app.services.enrollment import get_active_enrollment

router = APIRouter(prefix="/api/progress", tags=["progress"])

ANALYTICS_WINDOW_DAYS = 30


def _completion_rate(completed: int, total: int) -> float:
    return round(completed / total * 100, 1) if total else 0.0


@router.get("/overview", response_model=ProgressOverviewOut)
async def overview(current_user: CurrentUser, db: Annotated[AsyncSession, Depends(get_db)]):
    """Per active enrollment: lessons attempted, completed, score and time totals."""
    result = await db.execute(
        select(Enrollment)
        .where(Enrollment.user_id == current_user.id, Enrollment.is_active == True)  # noqa: E712
        .options(selectinload(Enrollment.language), selectinload(Enrollment.progress))
    )
    items = []
    for enrollment in result.scalars().all():
        rows = enrollment.progress
        completed = sum(1 for p in rows if p.completed)
        items.append(LanguageOverviewSchema(
            language=LanguageBriefSchema.model_validate(enrollment.language),
            level=enrollment.level,
            started_at=enrollment.started_at,
            total_lessons=len(rows),
            completed_lessons=completed,
            completion_rate=_completion_rate(completed, len(rows)),
            total_score=sum(p.score for p in rows),
            total_time=sum(p.time_spent for p in rows),
        ))
    return ProgressOverviewOut(overview=items)


@router.get("/language/{language_id}", response_model=LanguageProgressOut)
async def language_progress(
    language_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    enrollment = await get_active_enrollment(db, current_user.id, language_id)
    if enrollment is None:
        raise NotEnrolled()

    lessons = (await db.execute(
        select(Lesson)
        .where(Lesson.language_id == language_id, Lesson.is_active == True)  # noqa: E712
        .order_by(Lesson.order)
    )).scalars().all()

    progress_rows = (await db.execute(
        select(Progress).where(
            Progress.user_id == current_user.id,
            Progress.lesson_id.in_([lesson.id for lesson in lessons]),
        )
    )).scalars().all()
    by_lesson = {p.lesson_id: p for p in progress_rows}

    rows = []
    for lesson in lessons:
        p = by_lesson.get(lesson.id)
        rows.append(LessonProgressRowSchema(
            id=lesson.id,
            title=lesson.title,
            description=lesson.description,
            order=lesson.order,
            difficulty=lesson.difficulty,
            progress=ProgressOut.model_validate(p) if p else None,
            is_completed=bool(p and p.completed),
        ))

    completed = sum(1 for r in rows if r.is_completed)
    return LanguageProgressOut(
        language_id=language_id,
        level=enrollment.level,
        lessons=rows,
        statistics=ProgressStatisticsSchema(
            total_lessons=len(lessons),
            completed_lessons=completed,
            completion_rate=_completion_rate(completed, len(lessons)),
            total_score=sum(p.score for p in progress_rows),
            total_time=sum(p.time_spent for p in progress_rows),
        ),
    )


@router.get("/lesson/{lesson_id}", response_model=LessonProgressOut)
async def lesson_progress(
    lesson_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    result = await db.execute(
        select(Progress)
        .where(Progress.user_id == current_user.id, Progress.lesson_id == lesson_id)
        .options(selectinload(Progress.lesson).selectinload(Lesson.language))
    )
    progress = result.scalar_one_or_none()
    if not progress:
        return LessonProgressOut(progress=None, message="No progress recorded for this lesson")
    return LessonProgressOut(
        progress=ProgressOut.model_validate(progress),
        lesson_title=progress.lesson.title,
        language_name=progress.lesson.language.name,
    )


@router.get("/analytics", response_model=AnalyticsOut)
async def analytics(current_user: CurrentUser, db: Annotated[AsyncSession, Depends(get_db)]):
    """Completions of the last 30 days bucketed by UTC date."""
    since = utcnow() - timedelta(days=ANALYTICS_WINDOW_DAYS)
    result = await db.execute(
        select(Progress)
        .where(Progress.user_id == current_user.id, Progress.completed_at >= since)
        .order_by(Progress.completed_at)
    )
    recent = result.scalars().all()

    daily: dict[str, DailyProgressSchema] = defaultdict(DailyProgressSchema)
    for p in recent:
        bucket = daily[as_utc(p.completed_at).date().isoformat()]
        bucket.lessons_completed += 1
        bucket.total_score += p.score
        bucket.total_time += p.time_spent

    total = len(recent)
    return AnalyticsOut(
        period=f"{ANALYTICS_WINDOW_DAYS} days",
        total_lessons_completed=total,
        average_score=round(sum(p.score for p in recent) / total) if total else 0,
        average_time_per_lesson=round(sum(p.time_spent for p in recent) / total) if total else 0,
        daily_progress=dict(daily),
        learning_streak=current_user.streak,
    )
