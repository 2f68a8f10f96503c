"""Auth dependencies (bearer token -> User) and session routes."""
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AppError, NotFound
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import UserOut
from app.services.sessions import resolve_session, revoke_session

router = APIRouter(prefix="/api/auth", tags=["auth"])

bearer_scheme = HTTPBearer(auto_error=False)


def _token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    return credentials.credentials if credentials else None


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> User:
    """Resolve the acting user; unauthenticated requests are rejected."""
    return await resolve_session(db, _token(credentials))


async def get_current_user_optional(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> User | None:
    """Return current user if the bearer token is valid; else None."""
    token = _token(credentials)
    if not token:
        return None
    try:
        return await resolve_session(db, token)
    except AppError as exc:
        logger.debug("Continuing without identity: {}", exc.code)
        return None


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_current_user_optional)]


@router.get("/me", response_model=UserOut)
async def me(current_user: CurrentUser):
    """The identity the bearer token resolves to."""
    return current_user


@router.post("/logout")
async def logout(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
):
    """Expire the session behind the presented token."""
    if not await revoke_session(db, _token(credentials)):
        raise NotFound("Session not found")
    return {"message": "Logged out"}
