"""
Unit tests for the pure progression rules.
"""
from datetime import datetime, timedelta, timezone

import pytest

from app.services.progression import (
    EXPERIENCE_PER_LEVEL,
    accrue_experience,
    clamp_score,
    compute_available_achievements,
    days_between,
    evaluate_perfect_score,
    evaluate_streak,
    lesson_milestone_unlock,
    level_for_experience,
    level_up_unlock,
    progress_percentage,
    streak_milestone_unlock,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


class TestScoring:
    @pytest.mark.parametrize("raw,total,expected", [
        (15, 20, 15),
        (25, 20, 20),
        (-5, 20, 0),
        (5, 0, 0),
    ])
    def test_clamp_score(self, raw, total, expected):
        assert clamp_score(raw, total) == expected


class TestExperience:
    def test_level_tracks_experience(self):
        for experience in (0, 1, 99, 100, 101, 250, 999):
            assert level_for_experience(experience) == experience // EXPERIENCE_PER_LEVEL + 1

    def test_one_experience_per_ten_score_points(self):
        gain = accrue_experience(current_experience=0, current_level=1, final_score=19)
        assert gain.experience_gained == 1
        assert gain.new_experience == 1
        assert gain.new_level == 1
        assert not gain.leveled_up

    def test_crossing_a_hundred_levels_up(self):
        gain = accrue_experience(current_experience=95, current_level=1, final_score=50)
        assert gain.experience_gained == 5
        assert gain.new_experience == 100
        assert gain.new_level == 2
        assert gain.leveled_up

    def test_zero_score_gains_nothing(self):
        gain = accrue_experience(current_experience=42, current_level=1, final_score=0)
        assert gain.experience_gained == 0
        assert gain.new_experience == 42
        assert not gain.leveled_up

    def test_level_up_unlock_is_keyed_by_level(self):
        unlock = level_up_unlock(3)
        assert unlock.type == "level_up"
        assert unlock.referent == "level:3"
        assert unlock.title == "Level 3!"


class TestPerfectScore:
    def test_full_marks_unlock(self):
        unlock = evaluate_perfect_score(20, 20, lesson_id=7, lesson_title="Greetings", already_unlocked=False)
        assert unlock is not None
        assert unlock.type == "perfect_score"
        assert unlock.referent == "lesson:7"
        assert "Greetings" in unlock.title

    def test_only_once_per_lesson(self):
        assert evaluate_perfect_score(20, 20, 7, "Greetings", already_unlocked=True) is None

    def test_short_of_full_marks(self):
        assert evaluate_perfect_score(19, 20, 7, "Greetings", already_unlocked=False) is None

    def test_lesson_without_points_cannot_be_aced(self):
        assert evaluate_perfect_score(0, 0, 7, "Empty", already_unlocked=False) is None


class TestStreak:
    def test_first_login_starts_streak(self):
        update = evaluate_streak(0, None, NOW)
        assert update.streak == 1
        assert update.last_login == NOW
        assert update.changed

    def test_next_day_extends(self):
        update = evaluate_streak(4, NOW - timedelta(days=1, hours=3), NOW)
        assert update.streak == 5
        assert update.last_login == NOW

    def test_same_day_is_idempotent(self):
        last = NOW - timedelta(hours=5)
        first = evaluate_streak(4, last, NOW)
        second = evaluate_streak(first.streak, first.last_login, NOW + timedelta(hours=1))
        assert not first.changed
        assert (first.streak, first.last_login) == (4, last)
        assert (second.streak, second.last_login) == (4, last)

    def test_gap_resets_to_zero(self):
        update = evaluate_streak(3, NOW - timedelta(days=2), NOW)
        assert update.streak == 0
        assert update.last_login == NOW
        assert update.changed

    def test_last_login_in_future_counts_as_same_day(self):
        update = evaluate_streak(2, NOW + timedelta(days=3), NOW)
        assert not update.changed
        assert update.streak == 2

    def test_naive_timestamps_are_treated_as_utc(self):
        naive = datetime(2026, 3, 9, 12, 0)
        assert days_between(naive, NOW) == 1
        assert evaluate_streak(1, naive, NOW).streak == 2

    def test_days_are_floored(self):
        assert days_between(NOW - timedelta(hours=47, minutes=59), NOW) == 1


class TestMilestones:
    def test_streak_milestone_on_crossing(self):
        unlock = streak_milestone_unlock(6, 7)
        assert unlock is not None
        assert unlock.referent == "streak:7"

    def test_no_streak_milestone_without_crossing(self):
        assert streak_milestone_unlock(7, 7) is None
        assert streak_milestone_unlock(0, 1) is None
        assert streak_milestone_unlock(8, 0) is None

    def test_lesson_milestone_at_target_counts(self):
        assert lesson_milestone_unlock(10).referent == "lessons:10"
        assert lesson_milestone_unlock(11) is None
        assert lesson_milestone_unlock(0) is None


class TestAvailableAchievements:
    def test_new_user_sees_every_family(self):
        available = compute_available_achievements(1, 0, 0, 0)
        assert [a.type for a in available] == ["level_up", "streak", "lesson_complete", "perfect_score"]

        level = available[0]
        assert (level.progress, level.target, level.progress_percentage) == (1, 2, 50.0)
        streak = available[1]
        assert (streak.progress, streak.target, streak.progress_percentage) == (0, 7, 0.0)

    def test_level_target_stops_at_ten(self):
        types = [a.type for a in compute_available_achievements(10, 0, 0, 0)]
        assert "level_up" not in types

    def test_exhausted_targets_are_omitted(self):
        types = [a.type for a in compute_available_achievements(3, 100, 100, 50)]
        assert types == ["level_up"]

    def test_lesson_family_needs_some_progress(self):
        types = [a.type for a in compute_available_achievements(1, 0, 0, 0, has_progress=False)]
        assert "lesson_complete" not in types

    def test_next_target_skips_reached_ones(self):
        available = compute_available_achievements(2, 9, 12, 5)
        by_type = {a.type: a for a in available}
        assert by_type["streak"].target == 14
        assert by_type["lesson_complete"].target == 25
        assert by_type["perfect_score"].target == 10

    @pytest.mark.parametrize("progress,target,expected", [
        (3, 7, 42.9),
        (8, 7, 100.0),
        (-1, 7, 0.0),
        (0, 0, 100.0),
    ])
    def test_percentage_is_clamped(self, progress, target, expected):
        assert progress_percentage(progress, target) == expected
