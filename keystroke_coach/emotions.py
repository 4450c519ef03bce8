# ABOUTME: Emotional state classification from behavioral indicators via an ordered rule cascade
from enum import Enum
from typing import Callable, Tuple

from .indicators import BehavioralIndicators, Trend

FLOW_STREAK_LENGTH = 20
CONFUSED_MIN_PAUSES = 3
CONFUSED_MIN_AVG_PAUSE_MS = 10_000
PERFECTIONIST_BACKSPACE_RATIO = 0.3
BORED_MIN_SESSION_MS = 5 * 60_000


class EmotionalState(str, Enum):
    """The learner's momentary state, as read from typing behavior."""

    FRUSTRATED = "frustrated"  # Speeding up while quality drops
    CONFUSED = "confused"  # Long hesitations, unsure what to press
    PERFECTIONIST = "perfectionist"  # Keeps deleting and retrying
    BORED = "bored"  # Slowing down late in a long session
    FLOW = "flow"  # Long run of correct keystrokes
    IMPROVING = "improving"  # Faster without losing accuracy
    NEUTRAL = "neutral"


Rule = Tuple[Callable[[BehavioralIndicators], bool], EmotionalState]

# Evaluated top to bottom; the first matching rule wins.
CLASSIFICATION_RULES: Tuple[Rule, ...] = (
    (
        lambda i: i.streak_length >= FLOW_STREAK_LENGTH,
        EmotionalState.FLOW,
    ),
    (
        lambda i: i.wpm_trend == Trend.RISING and i.accuracy_trend == Trend.FALLING,
        EmotionalState.FRUSTRATED,
    ),
    (
        lambda i: i.pause_count >= CONFUSED_MIN_PAUSES
        and i.avg_pause_duration_ms > CONFUSED_MIN_AVG_PAUSE_MS,
        EmotionalState.CONFUSED,
    ),
    (
        lambda i: i.backspace_ratio > PERFECTIONIST_BACKSPACE_RATIO,
        EmotionalState.PERFECTIONIST,
    ),
    (
        lambda i: i.wpm_trend == Trend.FALLING
        and i.accuracy_trend == Trend.STABLE
        and i.session_duration_ms > BORED_MIN_SESSION_MS,
        EmotionalState.BORED,
    ),
    (
        lambda i: i.wpm_trend == Trend.RISING
        and i.accuracy_trend in (Trend.STABLE, Trend.RISING),
        EmotionalState.IMPROVING,
    ),
)


def detect_emotional_state(indicators: BehavioralIndicators) -> EmotionalState:
    """Classify indicators into exactly one emotional state."""
    for matches, state in CLASSIFICATION_RULES:
        if matches(indicators):
            return state
    return EmotionalState.NEUTRAL
