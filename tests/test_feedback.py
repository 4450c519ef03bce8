# ABOUTME: Unit tests for adaptive feedback messages
import pytest

from keystroke_coach.emotions import EmotionalState
from keystroke_coach.engine import SessionStats
from keystroke_coach.feedback import (
    FeedbackType, WORD_COMPLETE_MESSAGES, EMOTIONAL_FEEDBACK,
    get_emotional_feedback, get_keystroke_feedback, get_word_complete_feedback,
    get_lesson_end_feedback, get_return_feedback, format_duration
)


def make_stats(wpm=30, accuracy=90, duration_ms=60_000):
    return SessionStats(
        wpm=wpm,
        accuracy=accuracy,
        total_keystrokes=100,
        correct_keystrokes=accuracy,
        error_keystrokes=100 - accuracy,
        duration_ms=duration_ms,
    )


class TestEmotionalFeedback:
    """Test the state-to-message lookup."""

    @pytest.mark.parametrize('state', list(EmotionalState))
    def test_every_state_has_a_message(self, state):
        message = get_emotional_feedback(state)
        assert message.text
        assert message.priority >= 1

    def test_categories(self):
        assert get_emotional_feedback(EmotionalState.FRUSTRATED).type == FeedbackType.CALM
        assert get_emotional_feedback(EmotionalState.CONFUSED).type == FeedbackType.HINT
        assert get_emotional_feedback(EmotionalState.FLOW).type == FeedbackType.CELEBRATE
        for state in (EmotionalState.PERFECTIONIST, EmotionalState.BORED,
                      EmotionalState.IMPROVING, EmotionalState.NEUTRAL):
            assert get_emotional_feedback(state).type == FeedbackType.ENCOURAGE

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            EMOTIONAL_FEEDBACK[EmotionalState.NEUTRAL] = None


class TestKeystrokeFeedback:
    """Test streak milestone messages."""

    @pytest.mark.parametrize('streak', [10, 20, 50, 100])
    def test_milestones(self, streak):
        message = get_keystroke_feedback(True, streak)
        assert message is not None
        assert message.type == FeedbackType.CELEBRATE

    @pytest.mark.parametrize('streak', [0, 1, 9, 11, 19, 21, 49, 99, 101, 200])
    def test_no_message_between_milestones(self, streak):
        assert get_keystroke_feedback(True, streak) is None

    @pytest.mark.parametrize('streak', [10, 20, 50, 100])
    def test_no_message_for_incorrect_keystroke(self, streak):
        assert get_keystroke_feedback(False, streak) is None


class TestWordCompleteFeedback:
    """Test the rotating affirmations."""

    def test_round_robin(self):
        n = len(WORD_COMPLETE_MESSAGES)
        for i in range(3 * n):
            assert get_word_complete_feedback(i) == get_word_complete_feedback(i + n)

    def test_cycles_through_all_messages(self):
        n = len(WORD_COMPLETE_MESSAGES)
        texts = [get_word_complete_feedback(i).text for i in range(n)]
        assert texts == list(WORD_COMPLETE_MESSAGES)


class TestLessonEndFeedback:
    """Test end-of-lesson messages."""

    def test_summary_always_first(self):
        messages = get_lesson_end_feedback(make_stats(wpm=12, accuracy=70, duration_ms=45_000))
        assert len(messages) == 1
        assert messages[0].type == FeedbackType.SUMMARY
        assert '12 words per minute' in messages[0].text
        assert '70%' in messages[0].text
        assert '45 seconds' in messages[0].text

    def test_duration_format(self):
        assert format_duration(59_400) == '59 seconds'
        assert format_duration(59_500) == '1 minute'
        assert format_duration(150_000) == '2 minutes'

    def test_perfect_accuracy(self):
        messages = get_lesson_end_feedback(make_stats(accuracy=100))
        texts = [m.text for m in messages]
        assert any('100%' in t and 'perfect' in t.lower() for t in texts)
        assert not any('Almost perfect' in t for t in texts)

    def test_near_perfect_accuracy(self):
        messages = get_lesson_end_feedback(make_stats(accuracy=95))
        assert any('Almost perfect' in m.text for m in messages)

    def test_improvement_percentage(self):
        messages = get_lesson_end_feedback(make_stats(wpm=30), make_stats(wpm=20))
        improved = [m for m in messages if m.emoji == '📈']
        assert len(improved) == 1
        assert '50%' in improved[0].text

    def test_improvement_from_zero_previous(self):
        messages = get_lesson_end_feedback(make_stats(wpm=10), make_stats(wpm=0))
        improved = [m for m in messages if m.emoji == '📈']
        assert '0%' in improved[0].text

    def test_decline_and_unchanged(self):
        declined = get_lesson_end_feedback(make_stats(wpm=15), make_stats(wpm=20))
        assert [m.emoji for m in declined if m.type == FeedbackType.ENCOURAGE] == ['💪']

        same = get_lesson_end_feedback(make_stats(wpm=20), make_stats(wpm=20))
        assert [m.emoji for m in same if m.type == FeedbackType.ENCOURAGE] == ['🎯']

    def test_high_speed(self):
        messages = get_lesson_end_feedback(make_stats(wpm=40))
        assert any(m.emoji == '⚡' for m in messages)
        assert not any(m.emoji == '⚡' for m in get_lesson_end_feedback(make_stats(wpm=39)))

    def test_sorted_by_priority(self):
        messages = get_lesson_end_feedback(
            make_stats(wpm=45, accuracy=97), make_stats(wpm=50)
        )
        priorities = [m.priority for m in messages]
        assert priorities == sorted(priorities)
        assert messages[0].type == FeedbackType.SUMMARY
        assert messages[-1].priority == 3


class TestReturnFeedback:
    """Test welcome-back tiers."""

    def test_tiers_are_distinct(self):
        tiers = [0, 1, 2, 7, 30]
        texts = {get_return_feedback(days).text for days in tiers}
        assert len(texts) == 5

    @pytest.mark.parametrize('days, same_as', [(6, 2), (29, 7), (365, 30)])
    def test_tier_boundaries(self, days, same_as):
        assert get_return_feedback(days) == get_return_feedback(same_as)

    def test_always_encouraging(self):
        for days in (0, 1, 3, 10, 100):
            assert get_return_feedback(days).type == FeedbackType.ENCOURAGE


if __name__ == '__main__':
    pytest.main([__file__])
