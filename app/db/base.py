"""SQLAlchemy declarative base and model imports for Alembic."""
from app.db.session import Base

# Import all models so Alembic can see them
from app.models.achievement import Achievement  # noqa: F401
from app.models.enrollment import Enrollment  # noqa: F401
from app.models.language import Language  # noqa: F401
from app.models.lesson import Exercise, Lesson  # noqa: F401
from app.models.progress import Progress  # noqa: F401
from app.models.session import AuthSession  # noqa: F401
from app.models.user import User  # noqa: F401

__all__ = ["Base", "User", "Language", "Lesson", "Exercise", "Enrollment", "Progress", "Achievement", "AuthSession"]
