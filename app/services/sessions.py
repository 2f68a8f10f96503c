"""Bearer-session gateway: a token is valid only while its session row is live."""
from datetime import datetime

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import SessionExpired, Unauthenticated
from app.core.security import create_access_token, decode_access_token
from app.core.timeutils import utcnow
from app.models.session import AuthSession
from app.models.user import User


async def open_session(db: AsyncSession, user: User, now: datetime | None = None) -> str:
    """Issue a token for the user and record its session. Returns the token."""
    token, expires_at = create_access_token(user.id, now=now)
    db.add(AuthSession(user_id=user.id, token=token, expires_at=expires_at))
    await db.commit()
    logger.debug("Opened session for user {}", user.id)
    return token


async def resolve_session(db: AsyncSession, token: str | None, now: datetime | None = None) -> User:
    """Resolve the acting user from a bearer token.

    Raises:
        Unauthenticated: no token, expired token, or the user no longer exists.
        InvalidToken: the token is malformed or its signature does not match.
        SessionExpired: the token is well-formed but has no live session.
    """
    if not token:
        raise Unauthenticated()

    claims = decode_access_token(token)
    user_id = int(claims["sub"])

    result = await db.execute(
        select(AuthSession.id).where(
            AuthSession.token == token,
            AuthSession.user_id == user_id,
            AuthSession.expires_at > (now or utcnow()),
        )
    )
    if result.first() is None:
        raise SessionExpired()

    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if user is None:
        raise Unauthenticated("User not found")
    return user


async def revoke_session(db: AsyncSession, token: str) -> bool:
    """Expire a session now. Returns False if the token had no session."""
    result = await db.execute(select(AuthSession).where(AuthSession.token == token))
    session = result.scalar_one_or_none()
    if session is None:
        return False
    session.expires_at = utcnow()
    await db.commit()
    logger.debug("Revoked session {} of user {}", session.id, session.user_id)
    return True
