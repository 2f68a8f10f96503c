"""User row access shared by the services that mutate progression counters."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound
from app.models.user import User


async def lock_user(db: AsyncSession, user_id: int) -> User:
    """Load the user row FOR UPDATE, refreshing any copy already in the session."""
    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("User not found")
    return user
