from app.models.user import User
from app.models.language import Language
from app.models.lesson import Lesson, Exercise
from app.models.enrollment import Enrollment
from app.models.progress import Progress
from app.models.achievement import Achievement
from app.models.session import AuthSession

__all__ = ["User", "Language", "Lesson", "Exercise", "Enrollment", "Progress", "Achievement", "AuthSession"]
