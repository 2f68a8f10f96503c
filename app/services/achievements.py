"""Achievement persistence and the "what's next" catalogue for a user."""
from loguru import logger
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.achievement import Achievement
from app.models.enrollment import Enrollment
from app.models.progress import Progress
from app.models.user import User
from app.schemas.achievement import AchievementUnlock, AvailableAchievementSchema
from app.services.progression import compute_available_achievements


async def has_achievement(db: AsyncSession, user_id: int, type_: str, referent: str) -> bool:
    result = await db.execute(
        select(Achievement.id).where(
            Achievement.user_id == user_id,
            Achievement.type == type_,
            Achievement.referent == referent,
        )
    )
    return result.first() is not None


async def grant_achievement(db: AsyncSession, user_id: int, unlock: AchievementUnlock) -> Achievement | None:
    """Stage an achievement row unless the user already holds it. Caller commits."""
    if await has_achievement(db, user_id, unlock.type, unlock.referent):
        return None
    achievement = Achievement(
        user_id=user_id,
        type=unlock.type,
        referent=unlock.referent,
        title=unlock.title,
        description=unlock.description,
        icon=unlock.icon,
    )
    db.add(achievement)
    await db.flush()
    logger.info("User {} unlocked {} ({})", user_id, unlock.type, unlock.title)
    return achievement


async def count_completed_lessons(db: AsyncSession, user_id: int, active_only: bool = True) -> tuple[int, int]:
    """Return (progress rows, completed rows) for a user, by default across active enrollments only."""
    query = select(
        func.count(Progress.id),
        func.coalesce(func.sum(case((Progress.completed == True, 1), else_=0)), 0),  # noqa: E712
    ).where(Progress.user_id == user_id)
    if active_only:
        query = query.join(Enrollment, Enrollment.id == Progress.enrollment_id).where(Enrollment.is_active == True)  # noqa: E712
    total, completed = (await db.execute(query)).one()
    return total or 0, completed or 0


async def count_perfect_scores(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(Achievement.id)).where(
            Achievement.user_id == user_id,
            Achievement.type == "perfect_score",
        )
    )
    return result.scalar_one()


async def list_available_achievements(db: AsyncSession, user: User) -> list[AvailableAchievementSchema]:
    total, completed = await count_completed_lessons(db, user.id)
    perfect = await count_perfect_scores(db, user.id)
    return compute_available_achievements(
        user_level=user.level,
        user_streak=user.streak,
        completed_lesson_count=completed,
        perfect_score_count=perfect,
        has_progress=total > 0,
    )
