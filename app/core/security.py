"""Password hashing and JWT bearer tokens."""
import uuid
from datetime import datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.config import get_settings
from app.core.errors import InvalidToken, Unauthenticated
from app.core.timeutils import utcnow

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(
    subject: str | int,
    extra: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> tuple[str, datetime]:
    """Sign a bearer token; returns (token, expires_at)."""
    settings = get_settings()
    expire = (now or utcnow()) + timedelta(minutes=settings.access_token_expire_minutes)
    # jti keeps tokens issued in the same second distinct
    to_encode = {"sub": str(subject), "exp": expire, "type": "access", "jti": uuid.uuid4().hex}
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm), expire


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry.

    Raises:
        Unauthenticated: the token has expired.
        InvalidToken: malformed token, bad signature or missing subject.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError as exc:
        raise Unauthenticated("Token expired") from exc
    except JWTError as exc:
        raise InvalidToken() from exc
    if not str(claims.get("sub", "")).isdigit():
        raise InvalidToken()
    return claims
