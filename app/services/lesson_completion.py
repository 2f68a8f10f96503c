"""Lesson completion: validate, clamp, upsert progress, accrue experience, unlock achievements.

Everything after validation runs as one unit of work on the request's session. The
user row is locked first, so two completions from the same user are applied one
after the other; the optimistic ``version_id`` on User catches any writer that got
past the lock (e.g. on SQLite, where FOR UPDATE is a no-op).
"""
from datetime import datetime

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import Conflict, InternalError, LessonNotFound, NotEnrolled, NotFound
from app.core.timeutils import utcnow
from app.models.lesson import Exercise, Lesson
from app.models.progress import Progress
from app.schemas.achievement import AchievementUnlock
from app.schemas.progress import ProgressOut
from app.schemas.progression import LessonCompletionOut
from app.services.achievements import count_completed_lessons, grant_achievement, has_achievement
from app.services.enrollment import get_active_enrollment
from app.services.progression import (
    accrue_experience,
    clamp_score,
    evaluate_perfect_score,
    lesson_milestone_unlock,
    level_up_unlock,
    perfect_score_referent,
)
from app.services.users import lock_user


async def get_active_lesson(db: AsyncSession, lesson_id: int) -> Lesson | None:
    result = await db.execute(
        select(Lesson).where(Lesson.id == lesson_id, Lesson.is_active == True)  # noqa: E712
    )
    return result.scalar_one_or_none()


async def lesson_total_points(db: AsyncSession, lesson_id: int) -> int:
    """Sum of active exercise points: the most a lesson can score."""
    result = await db.execute(
        select(func.coalesce(func.sum(Exercise.points), 0)).where(
            Exercise.lesson_id == lesson_id,
            Exercise.is_active == True,  # noqa: E712
        )
    )
    return int(result.scalar_one())


async def _upsert_progress(
    db: AsyncSession,
    user_id: int,
    lesson_id: int,
    enrollment_id: int,
    score: int,
    time_spent: int,
    now: datetime,
) -> tuple[Progress, bool]:
    """Create or overwrite the (user, lesson) progress row; returns (row, was_completed_before)."""
    result = await db.execute(
        select(Progress).where(Progress.user_id == user_id, Progress.lesson_id == lesson_id)
    )
    progress = result.scalar_one_or_none()
    was_completed = bool(progress and progress.completed)
    if progress is None:
        progress = Progress(user_id=user_id, lesson_id=lesson_id, enrollment_id=enrollment_id)
        db.add(progress)
    progress.score = score
    progress.time_spent = time_spent
    progress.completed = True
    progress.completed_at = now
    await db.flush()
    return progress, was_completed


async def _apply_completion(
    db: AsyncSession,
    user_id: int,
    lesson: Lesson,
    enrollment_id: int,
    raw_score: int,
    time_spent: int,
    now: datetime,
) -> LessonCompletionOut:
    user = await lock_user(db, user_id)

    total_points = await lesson_total_points(db, lesson.id)
    final_score = clamp_score(raw_score, total_points)

    progress, was_completed = await _upsert_progress(
        db, user_id, lesson.id, enrollment_id, final_score, time_spent, now
    )

    gain = accrue_experience(user.experience, user.level, final_score)
    user.experience = gain.new_experience
    user.level = gain.new_level
    await db.flush()

    unlocks: list[AchievementUnlock] = []
    if gain.leveled_up:
        unlocks.append(level_up_unlock(gain.new_level))

    perfect = evaluate_perfect_score(
        final_score,
        total_points,
        lesson.id,
        lesson.title,
        already_unlocked=await has_achievement(db, user_id, "perfect_score", perfect_score_referent(lesson.id)),
    )
    if perfect is not None:
        unlocks.append(perfect)

    if not was_completed:
        _, completed = await count_completed_lessons(db, user_id, active_only=False)
        milestone = lesson_milestone_unlock(completed)
        if milestone is not None:
            unlocks.append(milestone)

    granted = []
    for unlock in unlocks:
        if await grant_achievement(db, user_id, unlock) is not None:
            granted.append(unlock)

    return LessonCompletionOut(
        final_score=final_score,
        total_points=total_points,
        experience_gained=gain.experience_gained,
        new_experience=gain.new_experience,
        new_level=gain.new_level,
        leveled_up=gain.leveled_up,
        unlocked_achievements=granted,
        progress=ProgressOut.model_validate(progress),
    )


async def complete_lesson(
    db: AsyncSession,
    user_id: int,
    lesson_id: int,
    raw_score: int,
    time_spent: int,
    now: datetime | None = None,
) -> LessonCompletionOut:
    """Record a lesson completion for a user.

    Raises:
        LessonNotFound: lesson missing or inactive; nothing is written.
        NotEnrolled: no active enrollment in the lesson's language; nothing is written.
        Conflict: the user row changed underneath us; everything is rolled back.
        InternalError: any other persistence failure; everything is rolled back.
    """
    now = now or utcnow()

    lesson = await get_active_lesson(db, lesson_id)
    if lesson is None:
        raise LessonNotFound()

    enrollment = await get_active_enrollment(db, user_id, lesson.language_id)
    if enrollment is None:
        raise NotEnrolled()

    try:
        result = await _apply_completion(db, user_id, lesson, enrollment.id, raw_score, time_spent, now)
        await db.commit()
    except StaleDataError as exc:
        await db.rollback()
        logger.warning("Concurrent update of user {} while completing lesson {}", user_id, lesson_id)
        raise Conflict("Progress was updated concurrently, please retry") from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Completing lesson {} for user {} failed", lesson_id, user_id)
        raise InternalError("Failed to complete lesson") from exc
    except NotFound:
        await db.rollback()
        raise

    if result.leveled_up:
        logger.info("User {} reached level {}", user_id, result.new_level)
    logger.info(
        "User {} completed lesson {}: score {}/{} (+{} xp)",
        user_id, lesson_id, result.final_score, result.total_points, result.experience_gained,
    )
    return result
