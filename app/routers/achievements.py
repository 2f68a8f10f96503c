"""Achievement routes: unlocked list, stats, next targets, leaderboard."""
from collections import Counter
from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.timeutils import as_utc, utcnow
from app.db.session import get_db
from app.models.achievement import Achievement
from app.models.user import User
from app.routers.auth import CurrentUser, OptionalUser
from app.schemas.achievement import (
    AchievementListOut,
    AchievementOut,
    AchievementStatsOut,
    AvailableAchievementSchema,
    LeaderboardEntrySchema,
)
from app.services.achievements import list_available_achievements

router = APIRouter(prefix="/api/achievements", tags=["achievements"])

LEADERBOARD_SIZE = 10
RECENT_DAYS = 7


async def _user_achievements(db: AsyncSession, user_id: int) -> list[Achievement]:
    result = await db.execute(
        select(Achievement)
        .where(Achievement.user_id == user_id)
        .order_by(Achievement.unlocked_at.desc(), Achievement.id.desc())
    )
    return list(result.scalars().all())


@router.get("", response_model=AchievementListOut)
async def list_achievements(current_user: CurrentUser, db: Annotated[AsyncSession, Depends(get_db)]):
    """Unlocked achievements, newest first, also grouped by type."""
    achievements = [AchievementOut.model_validate(a) for a in await _user_achievements(db, current_user.id)]
    grouped: dict[str, list[AchievementOut]] = {}
    for a in achievements:
        grouped.setdefault(a.type, []).append(a)
    return AchievementListOut(
        achievements=achievements,
        grouped_achievements=grouped,
        total_count=len(achievements),
    )


@router.get("/stats", response_model=AchievementStatsOut)
async def achievement_stats(current_user: CurrentUser, db: Annotated[AsyncSession, Depends(get_db)]):
    achievements = await _user_achievements(db, current_user.id)
    since = utcnow() - timedelta(days=RECENT_DAYS)
    total = len(achievements)
    return AchievementStatsOut(
        total_achievements=total,
        type_counts=dict(Counter(a.type for a in achievements)),
        recent_achievements=sum(1 for a in achievements if as_utc(a.unlocked_at) >= since),
        achievement_rate=round(total / 30, 2),
    )


@router.get("/available", response_model=list[AvailableAchievementSchema])
async def available_achievements(current_user: CurrentUser, db: Annotated[AsyncSession, Depends(get_db)]):
    """Next target per achievement family with progress towards it."""
    return await list_available_achievements(db, current_user)


@router.get("/leaderboard", response_model=list[LeaderboardEntrySchema])
async def leaderboard(current_user: OptionalUser, db: Annotated[AsyncSession, Depends(get_db)]):
    """Top users by experience, then streak. A signed-in caller sees their own row flagged."""
    achievement_count = (
        select(func.count(Achievement.id))
        .where(Achievement.user_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    result = await db.execute(
        select(User, achievement_count.label("achievement_count"))
        .order_by(User.experience.desc(), User.streak.desc(), User.id)
        .limit(LEADERBOARD_SIZE)
    )
    return [
        LeaderboardEntrySchema(
            rank=rank,
            username=user.username,
            level=user.level,
            experience=user.experience,
            streak=user.streak,
            achievement_count=count,
            is_current_user=current_user is not None and user.id == current_user.id,
        )
        for rank, (user, count) in enumerate(result.all(), start=1)
    ]
