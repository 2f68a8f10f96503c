"""
Daily streak check persisted through the service.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.errors import InternalError, NotFound
from app.core.timeutils import as_utc
from app.models import Achievement, User
from app.services.streaks import check_streak

DAY_ONE = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)


class TestCheckStreak:
    async def test_first_check_starts_streak(self, db, world):
        result = await check_streak(db, world.user.id, now=DAY_ONE)
        assert result.streak == 1
        assert as_utc(result.last_login) == DAY_ONE

    async def test_same_day_repeat_changes_nothing(self, db, world):
        await check_streak(db, world.user.id, now=DAY_ONE)
        version = world.user.version_id

        result = await check_streak(db, world.user.id, now=DAY_ONE + timedelta(hours=8))

        assert result.streak == 1
        assert as_utc(result.last_login) == DAY_ONE
        await db.refresh(world.user)
        assert world.user.version_id == version

    async def test_consecutive_days_extend(self, db, world):
        for offset in range(3):
            result = await check_streak(db, world.user.id, now=DAY_ONE + timedelta(days=offset))
        assert result.streak == 3
        assert world.user.streak == 3

    async def test_missed_day_resets(self, db, world):
        world.user.streak = 3
        world.user.last_login = DAY_ONE
        await db.commit()

        result = await check_streak(db, world.user.id, now=DAY_ONE + timedelta(days=2))

        assert result.streak == 0
        assert as_utc(result.last_login) == DAY_ONE + timedelta(days=2)

    async def test_seventh_day_unlocks_milestone(self, db, world):
        world.user.streak = 6
        world.user.last_login = DAY_ONE
        await db.commit()

        result = await check_streak(db, world.user.id, now=DAY_ONE + timedelta(days=1))

        assert result.streak == 7
        achievements = (await db.execute(
            select(Achievement).where(Achievement.user_id == world.user.id)
        )).scalars().all()
        assert [(a.type, a.referent) for a in achievements] == [("streak", "streak:7")]

    async def test_unknown_user(self, db, world):
        with pytest.raises(NotFound):
            await check_streak(db, 9999, now=DAY_ONE)

    async def test_failed_milestone_rolls_back_streak(self, db, world):
        world.user.streak = 6
        world.user.last_login = DAY_ONE
        await db.commit()

        failing_grant = AsyncMock(side_effect=IntegrityError("INSERT INTO achievements", {}, Exception("boom")))
        with patch("app.services.streaks.grant_achievement", failing_grant):
            with pytest.raises(InternalError):
                await check_streak(db, world.user.id, now=DAY_ONE + timedelta(days=1))

        streak, last_login = (await db.execute(
            select(User.streak, User.last_login).where(User.id == world.user.id)
        )).one()
        assert streak == 6
        assert as_utc(last_login) == DAY_ONE
