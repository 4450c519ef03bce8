# ABOUTME: Unit tests for the achievement rule engine and badge catalog
from dataclasses import dataclass, replace
from datetime import date
from typing import ClassVar

import pytest

from keystroke_coach.badges import (
    BADGE_DEFINITIONS, AchievementContext, AchievementDefinition, BadgeCategory,
    FirstLesson, PerfectLesson, AccuracyAtLeast, NoBackspaceLesson, DayStreak,
    ModulesTried, FocusDuration, ReturnAfterAbsence, WpmMilestone, LessonsCompleted,
    check_badge_earned, check_all_badges, get_newly_earned_badges, get_badge
)


def badge(condition):
    return AchievementDefinition(
        id='test', name='Test', description='', emoji='',
        category=BadgeCategory.SPECIAL, condition=condition,
    )


@pytest.fixture
def context():
    """A modest session that earns nothing."""
    return AchievementContext(
        wpm=5,
        accuracy=80,
        backspace_count=4,
        duration_ms=60_000,
        streak=0,
        completed_lessons_count=0,
        lesson_id='lesson-1',
        modules_visited=frozenset(),
        last_active_date=None,
        today=date(2024, 3, 15),
    )


class TestCheckBadgeEarned:
    """Test each condition type."""

    def test_first_lesson(self, context):
        assert not check_badge_earned(badge(FirstLesson()), context)
        assert check_badge_earned(badge(FirstLesson()), replace(context, completed_lessons_count=1))

    def test_perfect_lesson(self, context):
        assert not check_badge_earned(badge(PerfectLesson()), replace(context, accuracy=99))
        assert check_badge_earned(badge(PerfectLesson()), replace(context, accuracy=100))

    def test_accuracy_threshold_inclusive(self, context):
        cond = badge(AccuracyAtLeast(min_accuracy=95))
        assert not check_badge_earned(cond, replace(context, accuracy=94))
        assert check_badge_earned(cond, replace(context, accuracy=95))

    def test_no_backspace(self, context):
        assert not check_badge_earned(badge(NoBackspaceLesson()), context)
        assert check_badge_earned(badge(NoBackspaceLesson()), replace(context, backspace_count=0))

    def test_streak(self, context):
        cond = badge(DayStreak(days=5))
        assert not check_badge_earned(cond, replace(context, streak=4))
        assert check_badge_earned(cond, replace(context, streak=5))

    def test_modules_tried(self, context):
        cond = badge(ModulesTried(count=3))
        assert not check_badge_earned(cond, replace(context, modules_visited=frozenset({'a', 'b'})))
        assert check_badge_earned(cond, replace(context, modules_visited=frozenset({'a', 'b', 'c'})))

    def test_focus_duration(self, context):
        cond = badge(FocusDuration(minutes=5))
        assert not check_badge_earned(cond, replace(context, duration_ms=299_999))
        assert check_badge_earned(cond, replace(context, duration_ms=300_000))

    def test_return_after_absence(self, context):
        cond = badge(ReturnAfterAbsence(days=7))
        assert not check_badge_earned(cond, replace(context, last_active_date=date(2024, 3, 9)))
        assert check_badge_earned(cond, replace(context, last_active_date=date(2024, 3, 8)))

    def test_unknown_history_is_not_an_absence(self, context):
        cond = badge(ReturnAfterAbsence(days=0))
        assert not check_badge_earned(cond, replace(context, last_active_date=None))

    def test_wpm_milestone(self, context):
        cond = badge(WpmMilestone(wpm=20))
        assert not check_badge_earned(cond, replace(context, wpm=19))
        assert check_badge_earned(cond, replace(context, wpm=20))

    def test_lessons_completed(self, context):
        cond = badge(LessonsCompleted(count=10))
        assert not check_badge_earned(cond, replace(context, completed_lessons_count=9))
        assert check_badge_earned(cond, replace(context, completed_lessons_count=10))

    def test_unregistered_condition_is_a_defect(self, context):
        @dataclass(frozen=True)
        class OneHandLesson:
            type: ClassVar[str] = 'one_hand_lesson'

        with pytest.raises(TypeError):
            check_badge_earned(badge(OneHandLesson()), context)


class TestCatalog:
    """Test the static badge catalog."""

    def test_ids_are_unique(self):
        ids = [b.id for b in BADGE_DEFINITIONS]
        assert len(ids) == len(set(ids))

    def test_catalog_contents(self):
        assert [b.id for b in BADGE_DEFINITIONS] == [
            'first-lesson', 'perfect-lesson', 'persistent', 'accurate', 'patient',
            'explorer', 'focused', 'comeback', 'pilot', 'rocket', 'ninja',
        ]

    def test_every_condition_is_evaluable(self, context):
        for definition in BADGE_DEFINITIONS:
            assert check_badge_earned(definition, context) in (True, False)

    def test_get_badge(self):
        assert get_badge('ninja').condition == WpmMilestone(wpm=40)
        assert get_badge('missing') is None


class TestBadgeSets:
    """Test full-catalog evaluation and the newly-earned filter."""

    def test_nothing_earned(self, context):
        assert check_all_badges(context) == []

    def test_check_all_in_catalog_order(self, context):
        strong = replace(
            context, wpm=32, accuracy=100, backspace_count=0, completed_lessons_count=1
        )
        ids = [b.id for b in check_all_badges(strong)]
        assert ids == ['first-lesson', 'perfect-lesson', 'accurate', 'patient', 'pilot', 'rocket']

    def test_newly_earned_excludes_ledger(self, context):
        strong = replace(context, wpm=45, accuracy=100, completed_lessons_count=1)
        earned = ['first-lesson', 'ninja']

        new_ids = [b.id for b in get_newly_earned_badges(strong, earned)]

        assert not set(new_ids) & set(earned)
        assert 'perfect-lesson' in new_ids
        assert 'rocket' in new_ids

    def test_same_context_twice_is_stateless(self, context):
        """The engine keeps no ledger; the caller's list decides."""
        strong = replace(context, completed_lessons_count=1)
        first = get_newly_earned_badges(strong, [])
        second = get_newly_earned_badges(strong, [])
        assert first == second
        assert get_newly_earned_badges(strong, [b.id for b in first]) == []


if __name__ == '__main__':
    pytest.main([__file__])
