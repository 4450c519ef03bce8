# ABOUTME: Behavioral indicator extraction (trends, pauses, backspacing, streaks) from keystrokes
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence

from .engine import CHARS_PER_WORD
from .utils import KeystrokeEvent

BACKSPACE_CODE = "Backspace"

# Gaps longer than this between consecutive keystrokes count as pauses
PAUSE_THRESHOLD_MS = 10_000

# Relative changes within +/- 5% are "stable"
TREND_THRESHOLD = 0.05

MIN_EVENTS_FOR_TREND = 4


class Trend(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


@dataclass(frozen=True)
class BehavioralIndicators:
    """Higher-order signals derived from one session's keystrokes."""

    wpm_trend: Trend
    accuracy_trend: Trend
    backspace_ratio: float
    pause_count: int
    avg_pause_duration_ms: float
    streak_length: int
    session_duration_ms: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "wpm_trend": self.wpm_trend.value,
            "accuracy_trend": self.accuracy_trend.value,
            "backspace_ratio": self.backspace_ratio,
            "pause_count": self.pause_count,
            "avg_pause_duration_ms": self.avg_pause_duration_ms,
            "streak_length": self.streak_length,
            "session_duration_ms": self.session_duration_ms,
        }


def is_backspace(event: KeystrokeEvent) -> bool:
    return event.code == BACKSPACE_CODE


def count_backspaces(events: Sequence[KeystrokeEvent]) -> int:
    """Number of backspace presses in the events."""
    return sum(1 for event in events if is_backspace(event))


def compute_trend(first: float, second: float) -> Trend:
    """Compare two values by relative change."""
    relative_delta = (second - first) / max(first, 0.001)
    if relative_delta > TREND_THRESHOLD:
        return Trend.RISING
    if relative_delta < -TREND_THRESHOLD:
        return Trend.FALLING
    return Trend.STABLE


def _slice_wpm(
    events: Sequence[KeystrokeEvent], chars_per_word: float = CHARS_PER_WORD
) -> float:
    """Unrounded WPM over a slice, timed by the slice's own first and last event."""
    if len(events) < 2:
        return 0.0
    duration_min = (events[-1].timestamp - events[0].timestamp) / 60_000
    if duration_min <= 0:
        return 0.0
    return len(events) / chars_per_word / duration_min


def _slice_accuracy(events: Sequence[KeystrokeEvent]) -> float:
    """Fraction of typed (non-backspace) keystrokes that were correct."""
    typed = [event for event in events if not is_backspace(event)]
    if not typed:
        return 1.0
    return sum(1 for event in typed if event.is_correct) / len(typed)


def _find_pauses(
    events: Sequence[KeystrokeEvent], threshold_ms: float
) -> List[float]:
    pauses = []
    for previous, current in zip(events, events[1:]):
        gap = current.timestamp - previous.timestamp
        if gap > threshold_ms:
            pauses.append(gap)
    return pauses


def _trailing_streak(events: Sequence[KeystrokeEvent]) -> int:
    streak = 0
    for event in reversed(events):
        if is_backspace(event) or not event.is_correct:
            break
        streak += 1
    return streak


def compute_indicators(
    events: Sequence[KeystrokeEvent],
    session_duration_ms: float,
    pause_threshold_ms: float = PAUSE_THRESHOLD_MS,
    chars_per_word: float = CHARS_PER_WORD,
) -> BehavioralIndicators:
    """Compute behavioral indicators for a session's keystrokes."""
    if not events:
        return BehavioralIndicators(
            wpm_trend=Trend.STABLE,
            accuracy_trend=Trend.STABLE,
            backspace_ratio=0.0,
            pause_count=0,
            avg_pause_duration_ms=0.0,
            streak_length=0,
            session_duration_ms=session_duration_ms,
        )

    backspace_ratio = count_backspaces(events) / len(events)

    pauses = _find_pauses(events, pause_threshold_ms)
    avg_pause = sum(pauses) / len(pauses) if pauses else 0.0

    if len(events) < MIN_EVENTS_FOR_TREND:
        wpm_trend = Trend.STABLE
        accuracy_trend = Trend.STABLE
    else:
        midpoint = len(events) // 2
        first_half = events[:midpoint]
        second_half = events[midpoint:]
        wpm_trend = compute_trend(
            _slice_wpm(first_half, chars_per_word),
            _slice_wpm(second_half, chars_per_word),
        )
        accuracy_trend = compute_trend(
            _slice_accuracy(first_half), _slice_accuracy(second_half)
        )

    return BehavioralIndicators(
        wpm_trend=wpm_trend,
        accuracy_trend=accuracy_trend,
        backspace_ratio=backspace_ratio,
        pause_count=len(pauses),
        avg_pause_duration_ms=avg_pause,
        streak_length=_trailing_streak(events),
        session_duration_ms=session_duration_ms,
    )
