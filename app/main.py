"""Lingua Quest - FastAPI app entry point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from app.core.config import get_settings
from app.core.errors import register_error_handlers
from app.core.logging import setup_logging
from app.db.base import Base
from app.db.session import engine, AsyncSessionLocal
from app.routers import achievements, auth, languages, lessons, progress, users
from app.services.seeding import seed_catalog

settings = get_settings()
setup_logging(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting {}", settings.app_name)
    if settings.create_tables_on_startup:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    if settings.seed_on_startup:
        async with AsyncSessionLocal() as db:
            await seed_catalog(db)

    yield
    await engine.dispose()
    logger.info("Stopped {}", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Language lessons with experience, levels, streaks and achievements",
    lifespan=lifespan,
)

register_error_handlers(app)

app.include_router(auth.router)
app.include_router(languages.router)
app.include_router(lessons.router)
app.include_router(progress.router)
app.include_router(achievements.router)
app.include_router(users.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
