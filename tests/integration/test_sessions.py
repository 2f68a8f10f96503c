"""
Bearer-session gateway: token checks and server-side session rows.
"""
from datetime import timedelta

import pytest
from jose import jwt

from app.core.config import get_settings
from app.core.errors import InvalidToken, SessionExpired, Unauthenticated
from app.core.security import create_access_token
from app.core.timeutils import utcnow
from app.services.sessions import open_session, resolve_session, revoke_session


class TestResolveSession:
    async def test_live_session_resolves_user(self, db, world):
        token = await open_session(db, world.user)
        user = await resolve_session(db, token)
        assert user.id == world.user.id

    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token(self, db, world, token):
        with pytest.raises(Unauthenticated):
            await resolve_session(db, token)

    async def test_garbage_token(self, db, world):
        with pytest.raises(InvalidToken):
            await resolve_session(db, "not.a.jwt")

    async def test_foreign_signature(self, db, world):
        forged = jwt.encode(
            {"sub": str(world.user.id), "exp": utcnow() + timedelta(hours=1)},
            "some-other-secret",
            algorithm=get_settings().algorithm,
        )
        with pytest.raises(InvalidToken):
            await resolve_session(db, forged)

    async def test_expired_token(self, db, world):
        token = await open_session(db, world.user, now=utcnow() - timedelta(days=30))
        with pytest.raises(Unauthenticated) as exc_info:
            await resolve_session(db, token)
        assert exc_info.value.detail == "Token expired"

    async def test_token_without_session_row(self, db, world):
        token, _ = create_access_token(world.user.id)
        with pytest.raises(SessionExpired):
            await resolve_session(db, token)

    async def test_session_row_past_expiry(self, db, world):
        token = await open_session(db, world.user)
        later = utcnow() + timedelta(minutes=get_settings().access_token_expire_minutes + 1)
        with pytest.raises(SessionExpired):
            await resolve_session(db, token, now=later)

    async def test_revoked_session(self, db, world):
        token = await open_session(db, world.user)
        assert await revoke_session(db, token)
        with pytest.raises(SessionExpired):
            await resolve_session(db, token)

    async def test_revoke_unknown_token(self, db, world):
        assert not await revoke_session(db, "unknown")
