"""Language catalogue and enrollment routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import NotFound
from app.db.session import get_db
from app.models.enrollment import Enrollment
from app.models.language import Language
from app.models.lesson import Lesson
from app.routers.auth import CurrentUser
from app.schemas.language import (
    EnrollmentOut,
    EnrollmentWithProgressOut,
    EnrollResultOut,
    LanguageDetailOut,
    LanguageOut,
    LessonBriefSchema,
)
from app.services.enrollment import enroll, unenroll

router = APIRouter(prefix="/api/languages", tags=["languages"])


@router.get("", response_model=list[LanguageOut])
async def list_languages(db: Annotated[AsyncSession, Depends(get_db)]):
    """All active languages, by name."""
    result = await db.execute(
        select(Language).where(Language.is_active == True).order_by(Language.name)  # noqa: E712
    )
    return result.scalars().all()


@router.get("/enrollments", response_model=list[EnrollmentWithProgressOut])
async def list_enrollments(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Active enrollments of the current user with completion counts."""
    result = await db.execute(
        select(Enrollment)
        .where(Enrollment.user_id == current_user.id, Enrollment.is_active == True)  # noqa: E712
        .options(selectinload(Enrollment.language), selectinload(Enrollment.progress))
        .order_by(Enrollment.started_at.desc())
    )
    enrollments = result.scalars().all()

    out = []
    for enrollment in enrollments:
        total = len(enrollment.progress)
        completed = sum(1 for p in enrollment.progress if p.completed)
        out.append(EnrollmentWithProgressOut(
            **EnrollmentOut.model_validate(enrollment).model_dump(),
            language=LanguageOut.model_validate(enrollment.language),
            total_lessons=total,
            completed_lessons=completed,
            progress_percentage=round(completed / total * 100) if total else 0,
        ))
    return out


@router.get("/{language_id}", response_model=LanguageDetailOut)
async def get_language(language_id: int, db: Annotated[AsyncSession, Depends(get_db)]):
    """One language with its active lessons in order."""
    language = (await db.execute(select(Language).where(Language.id == language_id))).scalar_one_or_none()
    if not language:
        raise NotFound("Language not found")

    lessons = (await db.execute(
        select(Lesson)
        .where(Lesson.language_id == language_id, Lesson.is_active == True)  # noqa: E712
        .order_by(Lesson.order)
    )).scalars().all()

    return LanguageDetailOut(
        **LanguageOut.model_validate(language).model_dump(),
        lessons=[LessonBriefSchema.model_validate(lesson) for lesson in lessons],
    )


@router.post("/{language_id}/enroll", response_model=EnrollResultOut)
async def enroll_in_language(
    language_id: int,
    response: Response,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Enroll, or reactivate a previous enrollment (200 instead of 201)."""
    enrollment, created = await enroll(db, current_user.id, language_id)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return EnrollResultOut(
        message="Successfully enrolled in language" if created else "Enrollment reactivated",
        enrollment=EnrollmentOut.model_validate(enrollment),
    )


@router.delete("/{language_id}/enroll")
async def unenroll_from_language(
    language_id: int,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await unenroll(db, current_user.id, language_id)
    return {"message": "Successfully unenrolled from language"}
