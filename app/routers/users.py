"""User routes: profile, learning stats, daily streak check."""
from typing import Annotated

from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import InternalError
from app.db.session import get_db
from app.models.achievement import Achievement
from app.models.enrollment import Enrollment
from app.routers.auth import CurrentUser
from app.schemas.achievement import AchievementOut
from app.schemas.progression import StreakOut
from app.schemas.user import ProfileOut, ProfileUpdateSchema, UserStatsOut
from app.services.streaks import check_streak

router = APIRouter(prefix="/api/users", tags=["users"])

LATEST_ACHIEVEMENTS = 5


@router.get("/profile", response_model=ProfileOut)
async def get_profile(current_user: CurrentUser):
    return current_user


@router.put("/profile", response_model=ProfileOut)
async def update_profile(
    body: ProfileUpdateSchema,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update first name, last name and avatar; omitted fields are left alone."""
    changes = body.model_dump(exclude_unset=True)
    if "avatar" in changes and changes["avatar"] is not None:
        changes["avatar"] = str(changes["avatar"])
    for field, value in changes.items():
        setattr(current_user, field, value)
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Profile update for user {} failed", current_user.id)
        raise InternalError("Failed to update profile") from exc
    return current_user


@router.get("/stats", response_model=UserStatsOut)
async def user_stats(current_user: CurrentUser, db: Annotated[AsyncSession, Depends(get_db)]):
    """Totals across active enrollments plus the latest achievements."""
    result = await db.execute(
        select(Enrollment)
        .where(Enrollment.user_id == current_user.id, Enrollment.is_active == True)  # noqa: E712
        .options(selectinload(Enrollment.progress))
    )
    enrollments = result.scalars().all()
    rows = [p for e in enrollments for p in e.progress]
    completed = sum(1 for p in rows if p.completed)

    achievements = (await db.execute(
        select(Achievement)
        .where(Achievement.user_id == current_user.id)
        .order_by(Achievement.unlocked_at.desc(), Achievement.id.desc())
    )).scalars().all()

    return UserStatsOut(
        total_languages=len(enrollments),
        total_lessons=len(rows),
        completed_lessons=completed,
        completion_rate=round(completed / len(rows) * 100, 1) if rows else 0.0,
        total_score=sum(p.score for p in rows),
        total_time_spent=sum(p.time_spent for p in rows),
        total_achievements=len(achievements),
        achievements=[AchievementOut.model_validate(a) for a in achievements[:LATEST_ACHIEVEMENTS]],
    )


@router.post("/streak", response_model=StreakOut)
async def streak(current_user: CurrentUser, db: Annotated[AsyncSession, Depends(get_db)]):
    """Daily check-in: extends, resets or keeps the streak."""
    return await check_streak(db, current_user.id)
