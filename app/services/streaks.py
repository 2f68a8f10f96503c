"""Daily streak check: persist what evaluate_streak decides."""
from datetime import datetime

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import Conflict, InternalError, NotFound
from app.core.timeutils import utcnow
from app.schemas.progression import StreakOut
from app.services.achievements import grant_achievement
from app.services.progression import evaluate_streak, streak_milestone_unlock
from app.services.users import lock_user


async def check_streak(db: AsyncSession, user_id: int, now: datetime | None = None) -> StreakOut:
    """Advance, reset or keep the user's streak. Repeat calls on the same day change nothing."""
    now = now or utcnow()
    try:
        user = await lock_user(db, user_id)
        previous = user.streak
        update = evaluate_streak(previous, user.last_login, now)
        if not update.changed:
            # nothing to write; end the transaction to release the row lock
            await db.commit()
            return StreakOut(streak=update.streak, last_login=update.last_login)

        user.streak = update.streak
        user.last_login = update.last_login
        await db.flush()

        milestone = streak_milestone_unlock(previous, update.streak)
        if milestone is not None:
            await grant_achievement(db, user_id, milestone)
        await db.commit()
    except NotFound:
        await db.rollback()
        raise
    except StaleDataError as exc:
        await db.rollback()
        logger.warning("Concurrent streak update for user {}", user_id)
        raise Conflict("Streak was updated concurrently, please retry") from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Streak check for user {} failed", user_id)
        raise InternalError("Failed to check streak") from exc

    if update.streak == 0 and previous > 0:
        logger.info("User {} lost a {}-day streak", user_id, previous)
    else:
        logger.debug("User {} streak {} -> {}", user_id, previous, update.streak)
    return StreakOut(streak=update.streak, last_login=update.last_login)
