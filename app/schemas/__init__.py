from app.schemas.achievement import AchievementOut, AchievementUnlock, AvailableAchievementSchema
from app.schemas.progress import ProgressOut
from app.schemas.progression import ExperienceGain, LessonCompleteSchema, LessonCompletionOut, StreakOut, StreakUpdate
from app.schemas.user import ProfileOut, UserOut

__all__ = [
    "AchievementOut",
    "AchievementUnlock",
    "AvailableAchievementSchema",
    "ExperienceGain",
    "LessonCompleteSchema",
    "LessonCompletionOut",
    "ProfileOut",
    "ProgressOut",
    "StreakOut",
    "StreakUpdate",
    "UserOut",
]
