# ABOUTME: Package initialization for the typing coach analytics core
"""
Typing Coach Analytics Core

Session metrics, behavioral indicators, emotional state classification,
adaptive feedback and achievement evaluation for a children's typing tutor.
"""

__version__ = "1.0.0"
__description__ = (
    "Analytics and feedback core for a children's typing tutor"
)

from .utils import KeystrokeEvent, ConfigManager
from .engine import (
    CHARS_PER_WORD,
    KeyAccuracy,
    SessionStats,
    WeakKey,
    XpReward,
    calculate_wpm,
    calculate_accuracy,
    process_keystroke,
    compute_session_stats,
    find_weak_keys,
    calculate_realtime_wpm,
    is_lesson_complete,
    calculate_xp_reward,
)
from .indicators import BehavioralIndicators, Trend, compute_indicators
from .emotions import EmotionalState, detect_emotional_state
from .feedback import (
    FeedbackMessage,
    FeedbackType,
    get_emotional_feedback,
    get_keystroke_feedback,
    get_word_complete_feedback,
    get_lesson_end_feedback,
    get_return_feedback,
)
from .badges import (
    BADGE_DEFINITIONS,
    AchievementContext,
    AchievementDefinition,
    check_badge_earned,
    check_all_badges,
    get_newly_earned_badges,
)
from .analyzer import SessionAnalyzer

__all__ = [
    "KeystrokeEvent",
    "ConfigManager",
    "CHARS_PER_WORD",
    "KeyAccuracy",
    "SessionStats",
    "WeakKey",
    "XpReward",
    "calculate_wpm",
    "calculate_accuracy",
    "process_keystroke",
    "compute_session_stats",
    "find_weak_keys",
    "calculate_realtime_wpm",
    "is_lesson_complete",
    "calculate_xp_reward",
    "BehavioralIndicators",
    "Trend",
    "compute_indicators",
    "EmotionalState",
    "detect_emotional_state",
    "FeedbackMessage",
    "FeedbackType",
    "get_emotional_feedback",
    "get_keystroke_feedback",
    "get_word_complete_feedback",
    "get_lesson_end_feedback",
    "get_return_feedback",
    "BADGE_DEFINITIONS",
    "AchievementContext",
    "AchievementDefinition",
    "check_badge_earned",
    "check_all_badges",
    "get_newly_earned_badges",
    "SessionAnalyzer",
]
