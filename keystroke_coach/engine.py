# ABOUTME: Session metrics engine turning keystroke events into speed and accuracy stats
"""
Pure session metrics.

Every function takes plain data in and returns plain data out. Too little data
never reads as failure: no elapsed time means 0 WPM and no keystrokes means
100% accuracy.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence

from .utils import KeystrokeEvent, round_half_up

# Average word length in characters (including spaces) for the target script
CHARS_PER_WORD = 5.5

DEFAULT_REALTIME_WINDOW_MS = 5_000
DEFAULT_MIN_ATTEMPTS = 3

XP_BASE = 10
XP_SPEED_BONUS_PER_WPM = 2
XP_STREAK_STEP = 0.1
XP_MAX_MULTIPLIER = 2.0


@dataclass(frozen=True)
class KeyAccuracy:
    """Correct and total attempts for one expected character."""

    correct: int = 0
    total: int = 0


@dataclass(frozen=True)
class SessionStats:
    """Immutable snapshot of one session's speed and accuracy."""

    wpm: int
    accuracy: int
    total_keystrokes: int
    correct_keystrokes: int
    error_keystrokes: int
    duration_ms: float
    key_accuracy: Mapping[str, KeyAccuracy] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary for serialization."""
        return {
            "wpm": self.wpm,
            "accuracy": self.accuracy,
            "total_keystrokes": self.total_keystrokes,
            "correct_keystrokes": self.correct_keystrokes,
            "error_keystrokes": self.error_keystrokes,
            "duration_ms": self.duration_ms,
            "key_accuracy": {
                char: {"correct": acc.correct, "total": acc.total}
                for char, acc in self.key_accuracy.items()
            },
        }


@dataclass(frozen=True)
class WeakKey:
    """A key the learner misses often, with its accuracy and attempt count."""

    char: str
    accuracy: int
    total: int


@dataclass(frozen=True)
class XpReward:
    """Experience points for a lesson, broken down by source."""

    base: int
    accuracy_bonus: int
    speed_bonus: int
    streak_multiplier: float
    total: int


def calculate_wpm(
    char_count: int, elapsed_ms: float, chars_per_word: float = CHARS_PER_WORD
) -> int:
    """Calculate words per minute from character count and elapsed time."""
    if elapsed_ms <= 0 or char_count <= 0:
        return 0
    minutes = elapsed_ms / 60_000
    words = char_count / chars_per_word
    return round_half_up(words / minutes)


def calculate_accuracy(correct_count: int, total_count: int) -> int:
    """Calculate accuracy percentage; no keystrokes yet counts as 100%."""
    if total_count <= 0:
        return 100
    return round_half_up((correct_count / total_count) * 100)


def process_keystroke(
    expected: str, actual: str, code: str, timestamp: float
) -> KeystrokeEvent:
    """Build the record for a single keystroke."""
    return KeystrokeEvent(
        expected=expected,
        actual=actual,
        is_correct=expected == actual,
        code=code,
        timestamp=timestamp,
    )


def compute_session_stats(
    events: Sequence[KeystrokeEvent],
    started_at: float,
    ended_at: float,
    chars_per_word: float = CHARS_PER_WORD,
) -> SessionStats:
    """Compute full session statistics from a list of keystrokes.

    Per-key accuracy is keyed by the expected character, so a miss counts
    against the key the learner should have pressed.
    """
    total_keystrokes = len(events)
    correct_keystrokes = sum(1 for event in events if event.is_correct)
    error_keystrokes = total_keystrokes - correct_keystrokes
    duration_ms = ended_at - started_at

    counts: Dict[str, List[int]] = {}
    for event in events:
        entry = counts.setdefault(event.expected, [0, 0])
        entry[1] += 1
        if event.is_correct:
            entry[0] += 1

    key_accuracy = MappingProxyType(
        {char: KeyAccuracy(correct=c, total=t) for char, (c, t) in counts.items()}
    )

    return SessionStats(
        wpm=calculate_wpm(correct_keystrokes, duration_ms, chars_per_word),
        accuracy=calculate_accuracy(correct_keystrokes, total_keystrokes),
        total_keystrokes=total_keystrokes,
        correct_keystrokes=correct_keystrokes,
        error_keystrokes=error_keystrokes,
        duration_ms=duration_ms,
        key_accuracy=key_accuracy,
    )


def find_weak_keys(
    stats: SessionStats, min_attempts: int = DEFAULT_MIN_ATTEMPTS
) -> List[WeakKey]:
    """Keys with enough attempts, weakest first."""
    candidates = [
        WeakKey(
            char=char,
            accuracy=round_half_up((data.correct / data.total) * 100),
            total=data.total,
        )
        for char, data in stats.key_accuracy.items()
        if data.total >= min_attempts
    ]
    # sorted() is stable, so ties stay in first-seen order
    return sorted(candidates, key=lambda k: k.accuracy)


def calculate_realtime_wpm(
    events: Sequence[KeystrokeEvent],
    window_ms: float = DEFAULT_REALTIME_WINDOW_MS,
    chars_per_word: float = CHARS_PER_WORD,
) -> int:
    """WPM over the correct keystrokes of the trailing window.

    The divisor is the span of the qualifying keystrokes, not the window width.
    """
    if not events:
        return 0

    window_start = events[-1].timestamp - window_ms
    recent = [e for e in events if e.timestamp >= window_start and e.is_correct]
    if len(recent) < 2:
        return 0

    elapsed = recent[-1].timestamp - recent[0].timestamp
    return calculate_wpm(len(recent), elapsed, chars_per_word)


def is_lesson_complete(
    stats: SessionStats, target_wpm: float, target_accuracy: float
) -> bool:
    """A lesson passes only when both targets are met."""
    return stats.wpm >= target_wpm and stats.accuracy >= target_accuracy


def calculate_xp_reward(
    stats: SessionStats, target_wpm: float, target_accuracy: float, streak: int
) -> XpReward:
    """Calculate XP for a finished session."""
    # 1 XP per accuracy point above target
    accuracy_bonus = max(0, stats.accuracy - target_accuracy)

    # 2 XP per WPM above target
    speed_bonus = max(0, stats.wpm - target_wpm) * XP_SPEED_BONUS_PER_WPM

    # 1.0, 1.1, 1.2, ... capped at 2.0
    streak_multiplier = min(XP_MAX_MULTIPLIER, 1 + streak * XP_STREAK_STEP)

    total = round_half_up((XP_BASE + accuracy_bonus + speed_bonus) * streak_multiplier)

    return XpReward(
        base=XP_BASE,
        accuracy_bonus=accuracy_bonus,
        speed_bonus=speed_bonus,
        streak_multiplier=streak_multiplier,
        total=total,
    )
