"""Domain errors raised by services and rendered by the API as JSON."""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class AppError(Exception):
    """Base for every error the API reports to callers."""

    status_code = 500
    code = "internal"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail()
        super().__init__(self.detail)

    def default_detail(self) -> str:
        return self.code.replace("_", " ").capitalize()


class NotFound(AppError):
    status_code = 404
    code = "not_found"


class LessonNotFound(NotFound):
    code = "lesson_not_found"

    def default_detail(self) -> str:
        return "Lesson not found"


class NotEnrolled(AppError):
    status_code = 403
    code = "not_enrolled"

    def default_detail(self) -> str:
        return "Not enrolled in this language"


class Unauthenticated(AppError):
    status_code = 401
    code = "unauthenticated"

    def default_detail(self) -> str:
        return "Access token required"


class InvalidToken(AppError):
    status_code = 403
    code = "invalid_token"

    def default_detail(self) -> str:
        return "Invalid token"


class SessionExpired(AppError):
    status_code = 401
    code = "session_expired"

    def default_detail(self) -> str:
        return "Session expired"


class ValidationFailed(AppError):
    status_code = 422
    code = "validation_failed"


class Conflict(AppError):
    status_code = 409
    code = "conflict"


class InternalError(AppError):
    status_code = 500
    code = "internal"

    def default_detail(self) -> str:
        return "Internal error"


def _error_body(code: str, detail) -> dict:
    return {"error": code, "detail": detail}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("{} {} failed: {}", request.method, request.url.path, exc.detail)
    else:
        logger.debug("{} {} -> {} {}", request.method, request.url.path, exc.status_code, exc.code)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.code, exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("{} {} -> invalid payload", request.method, request.url.path)
    return JSONResponse(
        status_code=ValidationFailed.status_code,
        content=_error_body(ValidationFailed.code, jsonable_errors(exc)),
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Strip non-serializable context (e.g. ValueError instances) from pydantic errors."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
