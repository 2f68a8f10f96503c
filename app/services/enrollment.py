"""Enroll / unenroll. One enrollment row per (user, language), soft-deactivated and reactivated."""
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Conflict, InternalError, NotFound
from app.core.timeutils import utcnow
from app.models.enrollment import Enrollment
from app.models.language import Language


async def get_enrollment(db: AsyncSession, user_id: int, language_id: int) -> Enrollment | None:
    result = await db.execute(
        select(Enrollment).where(Enrollment.user_id == user_id, Enrollment.language_id == language_id)
    )
    return result.scalar_one_or_none()


async def get_active_enrollment(db: AsyncSession, user_id: int, language_id: int) -> Enrollment | None:
    enrollment = await get_enrollment(db, user_id, language_id)
    if enrollment is None or not enrollment.is_active:
        return None
    return enrollment


async def enroll(db: AsyncSession, user_id: int, language_id: int) -> tuple[Enrollment, bool]:
    """Enroll a user; returns (enrollment, created). Reactivation refreshes started_at."""
    result = await db.execute(
        select(Language).where(Language.id == language_id, Language.is_active == True)  # noqa: E712
    )
    if result.scalar_one_or_none() is None:
        raise NotFound("Language not found")

    enrollment = await get_enrollment(db, user_id, language_id)
    if enrollment is not None and enrollment.is_active:
        raise Conflict("Already enrolled in this language")

    created = enrollment is None
    if created:
        enrollment = Enrollment(user_id=user_id, language_id=language_id, level=1, is_active=True)
        db.add(enrollment)
    else:
        enrollment.is_active = True
        enrollment.started_at = utcnow()

    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Enrollment of user {} in language {} failed", user_id, language_id)
        raise InternalError("Enrollment failed") from exc

    logger.info("User {} {} language {}", user_id, "enrolled in" if created else "re-enrolled in", language_id)
    return enrollment, created


async def unenroll(db: AsyncSession, user_id: int, language_id: int) -> None:
    enrollment = await get_enrollment(db, user_id, language_id)
    if enrollment is None:
        raise NotFound("Enrollment not found")

    enrollment.is_active = False
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Unenrollment of user {} from language {} failed", user_id, language_id)
        raise InternalError("Unenrollment failed") from exc
    logger.info("User {} unenrolled from language {}", user_id, language_id)
