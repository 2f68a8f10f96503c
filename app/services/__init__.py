from app.services.lesson_completion import complete_lesson
from app.services.seeding import seed_catalog
from app.services.streaks import check_streak

__all__ = ["complete_lesson", "check_streak", "seed_catalog"]
