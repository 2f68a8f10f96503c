"""
Pytest configuration and shared fixtures.

Every test gets a fresh in-memory SQLite database with a small catalogue:
Spanish (enrolled) with two active lessons and one inactive lesson, and
French (not enrolled) with one lesson.
"""
import os
from types import SimpleNamespace

# Settings are cached on first import; configure them before anything under app/ loads
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from httpx import ASGITransport, AsyncClient
from loguru import logger
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import get_db
from app.models import Enrollment, Exercise, Language, Lesson, User
from app.services.sessions import open_session


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Pure function tests")
    config.addinivalue_line("markers", "integration: Tests against the database")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def world(db):
    """Catalogue plus one user enrolled in Spanish."""
    spanish = Language(name="Spanish", code="es", flag="🇪🇸", description="Learn Spanish")
    french = Language(name="French", code="fr", flag="🇫🇷", description="Learn French")
    db.add_all([spanish, french])
    await db.flush()

    greetings = Lesson(language_id=spanish.id, title="Greetings", order=1)
    food = Lesson(language_id=spanish.id, title="Food", order=2)
    retired = Lesson(language_id=spanish.id, title="Retired", order=3, is_active=False)
    bonjour = Lesson(language_id=french.id, title="Bonjour", order=1)
    db.add_all([greetings, food, retired, bonjour])
    await db.flush()

    db.add_all([
        Exercise(lesson_id=greetings.id, type="multiple_choice", question="Hello?", correct_answer="Hola",
                 options=["Hola", "Adiós"], order=1, points=10),
        Exercise(lesson_id=greetings.id, type="translation", question="Goodbye?", correct_answer="Adiós",
                 order=2, points=10),
        # inactive exercises never count towards a lesson's total
        Exercise(lesson_id=greetings.id, type="translation", question="Old", correct_answer="Viejo",
                 order=3, points=100, is_active=False),
        Exercise(lesson_id=food.id, type="translation", question="Bread?", correct_answer="pan",
                 order=1, points=50),
        Exercise(lesson_id=retired.id, type="translation", question="Gone?", correct_answer="ido",
                 order=1, points=10),
        Exercise(lesson_id=bonjour.id, type="translation", question="Hello?", correct_answer="Bonjour",
                 order=1, points=10),
    ])

    user = User(email="ana@example.com", username="ana", hashed_password="not-a-real-hash")
    db.add(user)
    await db.flush()

    enrollment = Enrollment(user_id=user.id, language_id=spanish.id)
    db.add(enrollment)
    await db.commit()

    return SimpleNamespace(
        user=user,
        spanish=spanish,
        french=french,
        greetings=greetings,
        food=food,
        retired=retired,
        bonjour=bonjour,
        enrollment=enrollment,
    )


@pytest.fixture
async def client(session_factory):
    """HTTP client against the app, one database session per request."""
    from app.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def auth_headers(db, world):
    token = await open_session(db, world.user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
