# ABOUTME: Adaptive feedback messages for emotional states, streaks, words, lesson end and returns
"""
Feedback message generation.

All lookup tables are read-only mappings built once at import. Messages are
plain values; the caller decides which to show (usually the lowest priority
number first).
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from .emotions import EmotionalState
from .engine import SessionStats
from .utils import round_half_up

HIGH_SPEED_WPM = 40
NEAR_PERFECT_ACCURACY = 95


class FeedbackType(str, Enum):
    ENCOURAGE = "encourage"
    CELEBRATE = "celebrate"
    CALM = "calm"
    HINT = "hint"
    SUMMARY = "summary"


@dataclass(frozen=True)
class FeedbackMessage:
    text: str
    type: FeedbackType
    priority: int
    emoji: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "type": self.type.value,
            "emoji": self.emoji,
            "priority": self.priority,
        }


EMOTIONAL_FEEDBACK: Mapping[EmotionalState, FeedbackMessage] = MappingProxyType(
    {
        EmotionalState.FRUSTRATED: FeedbackMessage(
            text="Let's take a breath. No rush. We'll start again from the last word",
            type=FeedbackType.CALM,
            emoji="🌬️",
            priority=1,
        ),
        EmotionalState.CONFUSED: FeedbackMessage(
            text="Need a hand? Here's a hint: look at the highlighted key and its finger",
            type=FeedbackType.HINT,
            emoji="💡",
            priority=1,
        ),
        EmotionalState.PERFECTIONIST: FeedbackMessage(
            text="Mistakes are fine! Mistakes mean learning. Keep going",
            type=FeedbackType.ENCOURAGE,
            emoji="💪",
            priority=2,
        ),
        EmotionalState.BORED: FeedbackMessage(
            text="Let's shift up a gear! Try pressing a little faster",
            type=FeedbackType.ENCOURAGE,
            emoji="⚡",
            priority=2,
        ),
        EmotionalState.FLOW: FeedbackMessage(
            text="Wow, you're on a roll!",
            type=FeedbackType.CELEBRATE,
            emoji="🔥",
            priority=1,
        ),
        EmotionalState.IMPROVING: FeedbackMessage(
            text="You're improving! Every key is getting better",
            type=FeedbackType.ENCOURAGE,
            emoji="📈",
            priority=2,
        ),
        EmotionalState.NEUTRAL: FeedbackMessage(
            text="Let's keep going! Every key you press gets you closer",
            type=FeedbackType.ENCOURAGE,
            emoji="👍",
            priority=3,
        ),
    }
)

STREAK_MILESTONES: Mapping[int, FeedbackMessage] = MappingProxyType(
    {
        10: FeedbackMessage(
            text="Ten in a row! Impressive!",
            type=FeedbackType.CELEBRATE,
            emoji="✨",
            priority=2,
        ),
        20: FeedbackMessage(
            text="Twenty in a row! You're on fire!",
            type=FeedbackType.CELEBRATE,
            emoji="🔥",
            priority=1,
        ),
        50: FeedbackMessage(
            text="Fifty in a row! You're riding the wave!",
            type=FeedbackType.CELEBRATE,
            emoji="🌊",
            priority=1,
        ),
        100: FeedbackMessage(
            text="A hundred in a row!! Unbelievable!",
            type=FeedbackType.CELEBRATE,
            emoji="💯",
            priority=1,
        ),
    }
)

WORD_COMPLETE_MESSAGES: Tuple[str, ...] = (
    "Nice!",
    "Excellent!",
    "Spot on!",
    "Great!",
    "Well done!",
)


def get_emotional_feedback(state: EmotionalState) -> FeedbackMessage:
    """Canned message for an emotional state."""
    return EMOTIONAL_FEEDBACK[state]


def get_keystroke_feedback(
    is_correct: bool, streak_length: int
) -> Optional[FeedbackMessage]:
    """Milestone message for a correct keystroke, or None."""
    if not is_correct:
        return None
    return STREAK_MILESTONES.get(streak_length)


def get_word_complete_feedback(word_index: int) -> FeedbackMessage:
    """Rotating affirmation for a finished word."""
    text = WORD_COMPLETE_MESSAGES[word_index % len(WORD_COMPLETE_MESSAGES)]
    return FeedbackMessage(
        text=text,
        type=FeedbackType.CELEBRATE,
        emoji="⭐",
        priority=3,
    )


def format_duration(duration_ms: float) -> str:
    """Whole minutes from 60 seconds up, seconds below that."""
    duration_sec = round_half_up(duration_ms / 1000)
    if duration_sec >= 60:
        minutes = duration_sec // 60
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    return f"{duration_sec} seconds"


def _comparison_feedback(
    stats: SessionStats, previous_stats: SessionStats
) -> FeedbackMessage:
    wpm_diff = stats.wpm - previous_stats.wpm
    if previous_stats.wpm > 0:
        pct = round_half_up(abs(wpm_diff) / previous_stats.wpm * 100)
    else:
        pct = 0

    if wpm_diff > 0:
        return FeedbackMessage(
            text=(
                f"Last time {previous_stats.wpm} words per minute, "
                f"today {stats.wpm}! That's {pct}% faster!"
            ),
            type=FeedbackType.CELEBRATE,
            emoji="📈",
            priority=2,
        )
    if wpm_diff < 0:
        return FeedbackMessage(
            text="That's okay. Everyone has slower days. What matters is to keep going!",
            type=FeedbackType.ENCOURAGE,
            emoji="💪",
            priority=3,
        )
    return FeedbackMessage(
        text="Same pace as last time. Let's beat it next round!",
        type=FeedbackType.ENCOURAGE,
        emoji="🎯",
        priority=3,
    )


def get_lesson_end_feedback(
    stats: SessionStats, previous_stats: Optional[SessionStats] = None
) -> List[FeedbackMessage]:
    """Messages for a finished lesson, most important first."""
    messages = [
        FeedbackMessage(
            text=(
                f"Finished! {stats.wpm} words per minute, {stats.accuracy}% accuracy, "
                f"time: {format_duration(stats.duration_ms)}"
            ),
            type=FeedbackType.SUMMARY,
            priority=1,
        )
    ]

    if stats.accuracy == 100:
        messages.append(
            FeedbackMessage(
                text="100% accuracy! Absolutely perfect!",
                type=FeedbackType.CELEBRATE,
                emoji="💯",
                priority=1,
            )
        )
    elif stats.accuracy >= NEAR_PERFECT_ACCURACY:
        messages.append(
            FeedbackMessage(
                text="Excellent accuracy! Almost perfect!",
                type=FeedbackType.CELEBRATE,
                emoji="🌟",
                priority=2,
            )
        )

    if previous_stats is not None:
        messages.append(_comparison_feedback(stats, previous_stats))

    if stats.wpm >= HIGH_SPEED_WPM:
        messages.append(
            FeedbackMessage(
                text=f"{stats.wpm} words per minute - fast as lightning!",
                type=FeedbackType.CELEBRATE,
                emoji="⚡",
                priority=2,
            )
        )

    return sorted(messages, key=lambda m: m.priority)


def get_return_feedback(days_since_last_visit: int) -> FeedbackMessage:
    """Welcome-back message for a returning learner. Never a scolding."""
    if days_since_last_visit <= 0:
        return FeedbackMessage(
            text="You're back! Let's pick up where we left off",
            type=FeedbackType.ENCOURAGE,
            emoji="👋",
            priority=2,
        )

    if days_since_last_visit == 1:
        return FeedbackMessage(
            text="Well done! You came back today too. Practicing every day is the secret",
            type=FeedbackType.ENCOURAGE,
            emoji="🌟",
            priority=2,
        )

    if days_since_last_visit < 7:
        return FeedbackMessage(
            text="Glad you're back! Let's start with something easy and fun",
            type=FeedbackType.ENCOURAGE,
            emoji="😊",
            priority=2,
        )

    if days_since_last_visit < 30:
        return FeedbackMessage(
            text="Welcome back! We missed you. Let's warm up a little and carry on",
            type=FeedbackType.ENCOURAGE,
            emoji="🤗",
            priority=2,
        )

    return FeedbackMessage(
        text="What a nice surprise to see you! Let's start fresh, no pressure",
        type=FeedbackType.ENCOURAGE,
        emoji="🌱",
        priority=2,
    )
