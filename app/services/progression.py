"""Progression rules: experience, levels, streaks and achievement unlocks.

Every function here is pure. Callers pass the current state (and ``now``) in and
persist whatever comes back; nothing in this module touches the database.
"""
from datetime import datetime

from app.core.timeutils import as_utc
from app.schemas.achievement import AchievementUnlock, AvailableAchievementSchema
from app.schemas.progression import ExperienceGain, StreakUpdate

# Experience: one point per 10 score points; a level every 100 experience
SCORE_PER_EXPERIENCE = 10
EXPERIENCE_PER_LEVEL = 100

# Level targets are only suggested below this level
MAX_SUGGESTED_LEVEL = 10

STREAK_TARGETS = (7, 14, 30, 60, 100)
LESSON_TARGETS = (10, 25, 50, 100)
PERFECT_SCORE_TARGETS = (5, 10, 20, 50)

SECONDS_PER_DAY = 24 * 60 * 60

ICON_LEVEL_UP = "🎉"
ICON_NEXT_LEVEL = "🎯"
ICON_PERFECT = "⭐"
ICON_STREAK = "🔥"
ICON_LESSONS = "📚"


def clamp_score(raw_score: int, total_points: int) -> int:
    """Clamp a caller-reported score into 0..total_points."""
    return max(0, min(raw_score, total_points))


def level_for_experience(experience: int) -> int:
    return experience // EXPERIENCE_PER_LEVEL + 1


def accrue_experience(current_experience: int, current_level: int, final_score: int) -> ExperienceGain:
    """Convert a lesson score into experience and derive the resulting level."""
    gained = final_score // SCORE_PER_EXPERIENCE
    new_experience = current_experience + gained
    new_level = level_for_experience(new_experience)
    return ExperienceGain(
        experience_gained=gained,
        new_experience=new_experience,
        new_level=new_level,
        leveled_up=new_level > current_level,
    )


def level_up_unlock(new_level: int) -> AchievementUnlock:
    return AchievementUnlock(
        type="level_up",
        referent=f"level:{new_level}",
        title=f"Level {new_level}!",
        description=f"Congratulations! You've reached level {new_level}",
        icon=ICON_LEVEL_UP,
    )


def evaluate_perfect_score(
    final_score: int,
    total_points: int,
    lesson_id: int,
    lesson_title: str,
    already_unlocked: bool,
) -> AchievementUnlock | None:
    """Perfect-score badge for a lesson, granted at most once per lesson.

    A lesson without points cannot be aced, so ``total_points == 0`` never unlocks.
    """
    if already_unlocked or total_points <= 0 or final_score != total_points:
        return None
    return AchievementUnlock(
        type="perfect_score",
        referent=perfect_score_referent(lesson_id),
        title=f"Perfect Score in {lesson_title}",
        description=f"You got a perfect score in {lesson_title}!",
        icon=ICON_PERFECT,
    )


def perfect_score_referent(lesson_id: int) -> str:
    return f"lesson:{lesson_id}"


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole elapsed days (floor), UTC-normalized."""
    delta = as_utc(later) - as_utc(earlier)
    return int(delta.total_seconds() // SECONDS_PER_DAY)


def evaluate_streak(current_streak: int, last_login: datetime | None, now: datetime) -> StreakUpdate:
    """Apply one login check to a streak.

    - no recorded login: first login, streak + 1
    - exactly one day since the last login: streak + 1
    - more than one day: reset to 0
    - same day (or a last login in the future): unchanged, last_login untouched
    """
    if last_login is None:
        return StreakUpdate(streak=current_streak + 1, last_login=now, changed=True)

    days = days_between(last_login, now)
    if days == 1:
        return StreakUpdate(streak=current_streak + 1, last_login=now, changed=True)
    if days > 1:
        return StreakUpdate(streak=0, last_login=now, changed=True)
    return StreakUpdate(streak=current_streak, last_login=last_login, changed=False)


def streak_milestone_unlock(previous_streak: int, new_streak: int) -> AchievementUnlock | None:
    """Badge for the streak milestone crossed by this update, if any."""
    reached = [t for t in STREAK_TARGETS if previous_streak < t <= new_streak]
    if not reached:
        return None
    target = reached[-1]
    return AchievementUnlock(
        type="streak",
        referent=f"streak:{target}",
        title=f"{target} Day Streak",
        description=f"You kept your learning streak for {target} days",
        icon=ICON_STREAK,
    )


def lesson_milestone_unlock(completed_count: int) -> AchievementUnlock | None:
    if completed_count not in LESSON_TARGETS:
        return None
    return AchievementUnlock(
        type="lesson_complete",
        referent=f"lessons:{completed_count}",
        title=f"Complete {completed_count} Lessons",
        description=f"You completed {completed_count} lessons",
        icon=ICON_LESSONS,
    )


def progress_percentage(progress: int, target: int) -> float:
    """Percent towards a target, clamped to 0..100."""
    if target <= 0:
        return 100.0
    return round(max(0.0, min(100.0, 100 * progress / target)), 1)


def _next_target(targets: tuple[int, ...], current: int) -> int | None:
    return next((t for t in targets if t > current), None)


def compute_available_achievements(
    user_level: int,
    user_streak: int,
    completed_lesson_count: int,
    perfect_score_count: int,
    has_progress: bool = True,
) -> list[AvailableAchievementSchema]:
    """Next targets a user can work towards, one per achievement family."""
    result = []

    if user_level < MAX_SUGGESTED_LEVEL:
        next_level = user_level + 1
        result.append(AvailableAchievementSchema(
            type="level_up",
            title=f"Reach Level {next_level}",
            description=f"Continue learning to reach level {next_level}",
            icon=ICON_NEXT_LEVEL,
            progress=user_level,
            target=next_level,
            progress_percentage=progress_percentage(user_level, next_level),
        ))

    streak_target = _next_target(STREAK_TARGETS, user_streak)
    if streak_target:
        result.append(AvailableAchievementSchema(
            type="streak",
            title=f"{streak_target} Day Streak",
            description=f"Maintain your learning streak for {streak_target} days",
            icon=ICON_STREAK,
            progress=user_streak,
            target=streak_target,
            progress_percentage=progress_percentage(user_streak, streak_target),
        ))

    lesson_target = _next_target(LESSON_TARGETS, completed_lesson_count) if has_progress else None
    if lesson_target:
        result.append(AvailableAchievementSchema(
            type="lesson_complete",
            title=f"Complete {lesson_target} Lessons",
            description=f"Complete {lesson_target} lessons to unlock this achievement",
            icon=ICON_LESSONS,
            progress=completed_lesson_count,
            target=lesson_target,
            progress_percentage=progress_percentage(completed_lesson_count, lesson_target),
        ))

    perfect_target = _next_target(PERFECT_SCORE_TARGETS, perfect_score_count)
    if perfect_target:
        result.append(AvailableAchievementSchema(
            type="perfect_score",
            title=f"{perfect_target} Perfect Scores",
            description=f"Get {perfect_target} perfect scores in lessons",
            icon=ICON_PERFECT,
            progress=perfect_score_count,
            target=perfect_target,
            progress_percentage=progress_percentage(perfect_score_count, perfect_target),
        ))

    return result
