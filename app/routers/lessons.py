"""Lesson routes: listing, detail, per-user progress, completion, next lesson."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload, with_loader_criteria

from app.core.errors import LessonNotFound, NotEnrolled, NotFound
from app.db.session import get_db
from app.models.lesson import Exercise, Lesson
from app.models.progress import Progress
from app.routers.auth import CurrentUser
from app.schemas.lesson import LessonDetailOut, LessonSummaryOut, LessonWithProgressOut, NextLessonOut
from app.schemas.progress import ProgressOut
from app.schemas.progression import LessonCompleteSchema, LessonCompletionOut
from app.services.enrollment import get_active_enrollment
from app.services.lesson_completion import complete_lesson

router = APIRouter(prefix="/api/lessons", tags=["lessons"])


async def _load_lesson_detail(db: AsyncSession, lesson_id: int) -> Lesson:
    result = await db.execute(
        select(Lesson)
        .where(Lesson.id == lesson_id, Lesson.is_active == True)  # noqa: E712
        .options(
            selectinload(Lesson.language),
            selectinload(Lesson.exercises),
            with_loader_criteria(Exercise, Exercise.is_active == True),  # noqa: E712
        )
    )
    lesson = result.scalar_one_or_none()
    if not lesson:
        raise LessonNotFound()
    return lesson


@router.get("/language/{language_id}", response_model=list[LessonSummaryOut])
async def list_lessons(language_id: int, db: Annotated[AsyncSession, Depends(get_db)]):
    """Active lessons of a language in order, with their active exercise count."""
    exercise_count = (
        select(func.count(Exercise.id))
        .where(Exercise.lesson_id == Lesson.id, Exercise.is_active == True)  # noqa: E712
        .correlate(Lesson)
        .scalar_subquery()
    )
    result = await db.execute(
        select(Lesson, exercise_count.label("exercise_count"))
        .where(Lesson.language_id == language_id, Lesson.is_active == True)  # noqa: E712
        .order_by(Lesson.order)
    )
    return [
        LessonSummaryOut(
            id=lesson.id,
            title=lesson.title,
            description=lesson.description,
            order=lesson.order,
            difficulty=lesson.difficulty,
            exercise_count=count,
        )
        for lesson, count in result.all()
    ]


@router.get("/{lesson_id}", response_model=LessonDetailOut)
async def get_lesson(lesson_id: int, db: Annotated[AsyncSession, Depends(get_db)]):
    """Lesson with its active exercises (answers are not included)."""
    return await _load_lesson_detail(db, lesson_id)


@router.get("/{lesson_id}/progress", response_model=LessonWithProgressOut)
async def get_lesson_with_progress(
    lesson_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    lesson = await _load_lesson_detail(db, lesson_id)
    if await get_active_enrollment(db, current_user.id, lesson.language_id) is None:
        raise NotEnrolled()

    progress = (await db.execute(
        select(Progress).where(Progress.user_id == current_user.id, Progress.lesson_id == lesson_id)
    )).scalar_one_or_none()

    out = LessonWithProgressOut.model_validate(lesson)
    out.user_progress = ProgressOut.model_validate(progress) if progress else None
    return out


@router.post("/{lesson_id}/complete", response_model=LessonCompletionOut)
async def complete(
    lesson_id: int,
    body: LessonCompleteSchema,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Submit a lesson result; returns the clamped score, experience and any unlocked achievements."""
    return await complete_lesson(db, current_user.id, lesson_id, body.score, body.time_spent)


@router.get("/{lesson_id}/next", response_model=NextLessonOut)
async def next_lesson(
    lesson_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """The next active lesson of the same language, if any."""
    current = (await db.execute(select(Lesson).where(Lesson.id == lesson_id))).scalar_one_or_none()
    if not current:
        raise NotFound("Current lesson not found")

    result = await db.execute(
        select(Lesson)
        .where(
            Lesson.language_id == current.language_id,
            Lesson.order > current.order,
            Lesson.is_active == True,  # noqa: E712
        )
        .order_by(Lesson.order)
        .limit(1)
    )
    nxt = result.scalar_one_or_none()
    if nxt is None:
        return NextLessonOut(next_lesson=None)
    count = (await db.execute(
        select(func.count(Exercise.id)).where(Exercise.lesson_id == nxt.id, Exercise.is_active == True)  # noqa: E712
    )).scalar_one()
    return NextLessonOut(next_lesson=LessonSummaryOut(
        id=nxt.id,
        title=nxt.title,
        description=nxt.description,
        order=nxt.order,
        difficulty=nxt.difficulty,
        exercise_count=count,
    ))
