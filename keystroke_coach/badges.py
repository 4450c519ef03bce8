# ABOUTME: Achievement rule engine - badge catalog and stateless condition evaluation
"""
Achievement (badge) evaluation.

Each badge carries one condition from a closed set of condition types. The
engine only answers "is this condition true for this context right now"; it
keeps no record of what was already granted. Callers own that ledger and pass
it to `get_newly_earned_badges`.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import (
    Callable,
    ClassVar,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
    Union,
)

from .utils import days_between


# =============================================================================
# CONDITIONS
# =============================================================================


@dataclass(frozen=True)
class FirstLesson:
    type: ClassVar[str] = "first_lesson"


@dataclass(frozen=True)
class PerfectLesson:
    type: ClassVar[str] = "perfect_lesson"


@dataclass(frozen=True)
class AccuracyAtLeast:
    min_accuracy: int
    type: ClassVar[str] = "accuracy"


@dataclass(frozen=True)
class NoBackspaceLesson:
    type: ClassVar[str] = "lesson_no_backspace"


@dataclass(frozen=True)
class DayStreak:
    days: int
    type: ClassVar[str] = "streak"


@dataclass(frozen=True)
class ModulesTried:
    count: int
    type: ClassVar[str] = "modules_tried"


@dataclass(frozen=True)
class FocusDuration:
    minutes: int
    type: ClassVar[str] = "focus_duration"


@dataclass(frozen=True)
class ReturnAfterAbsence:
    days: int
    type: ClassVar[str] = "return_after_absence"


@dataclass(frozen=True)
class WpmMilestone:
    wpm: int
    type: ClassVar[str] = "wpm_milestone"


@dataclass(frozen=True)
class LessonsCompleted:
    count: int
    type: ClassVar[str] = "lessons_completed"


BadgeCondition = Union[
    FirstLesson,
    PerfectLesson,
    AccuracyAtLeast,
    NoBackspaceLesson,
    DayStreak,
    ModulesTried,
    FocusDuration,
    ReturnAfterAbsence,
    WpmMilestone,
    LessonsCompleted,
]


class BadgeCategory(str, Enum):
    PERSISTENCE = "persistence"
    ACCURACY = "accuracy"
    SPEED = "speed"
    EXPLORATION = "exploration"
    SPECIAL = "special"


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    name: str
    description: str
    emoji: str
    category: BadgeCategory
    condition: BadgeCondition
    xp_reward: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "emoji": self.emoji,
            "category": self.category.value,
            "condition": self.condition.type,
            "xp_reward": self.xp_reward,
        }


@dataclass(frozen=True)
class AchievementContext:
    """Facts about the learner and the session just played.

    `today` is the reference date for absence checks; None means the current
    local date.
    """

    wpm: int
    accuracy: int
    backspace_count: int
    duration_ms: float
    streak: int
    completed_lessons_count: int
    lesson_id: str
    modules_visited: FrozenSet[str] = field(default_factory=frozenset)
    last_active_date: Optional[date] = None
    today: Optional[date] = None


# =============================================================================
# CATALOG
# =============================================================================

BADGE_DEFINITIONS: Tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        id="first-lesson",
        name="First Step",
        description="Completed your very first lesson!",
        emoji="⭐",
        category=BadgeCategory.SPECIAL,
        condition=FirstLesson(),
        xp_reward=10,
    ),
    AchievementDefinition(
        id="perfect-lesson",
        name="Perfect",
        description="Reached 100% accuracy in a lesson!",
        emoji="💎",
        category=BadgeCategory.ACCURACY,
        condition=PerfectLesson(),
        xp_reward=25,
    ),
    AchievementDefinition(
        id="persistent",
        name="Persistent",
        description="Practiced 5 days in a row",
        emoji="🔥",
        category=BadgeCategory.PERSISTENCE,
        condition=DayStreak(days=5),
        xp_reward=30,
    ),
    AchievementDefinition(
        id="accurate",
        name="Accurate",
        description="Reached 95% accuracy or more in a lesson",
        emoji="🎯",
        category=BadgeCategory.ACCURACY,
        condition=AccuracyAtLeast(min_accuracy=95),
        xp_reward=15,
    ),
    AchievementDefinition(
        id="patient",
        name="Patient",
        description="Finished a lesson without using Backspace",
        emoji="🧘",
        category=BadgeCategory.ACCURACY,
        condition=NoBackspaceLesson(),
        xp_reward=15,
    ),
    AchievementDefinition(
        id="explorer",
        name="Explorer",
        description="Tried 3 different modules",
        emoji="🗺️",
        category=BadgeCategory.EXPLORATION,
        condition=ModulesTried(count=3),
        xp_reward=20,
    ),
    AchievementDefinition(
        id="focused",
        name="Focused",
        description="Practiced for 5 minutes straight",
        emoji="🧠",
        category=BadgeCategory.SPECIAL,
        condition=FocusDuration(minutes=5),
        xp_reward=20,
    ),
    AchievementDefinition(
        id="comeback",
        name="Comeback",
        description="Came back to practice after 7 days away",
        emoji="🦅",
        category=BadgeCategory.PERSISTENCE,
        condition=ReturnAfterAbsence(days=7),
        xp_reward=20,
    ),
    AchievementDefinition(
        id="pilot",
        name="Pilot",
        description="Reached 20 words per minute",
        emoji="✈️",
        category=BadgeCategory.SPEED,
        condition=WpmMilestone(wpm=20),
        xp_reward=20,
    ),
    AchievementDefinition(
        id="rocket",
        name="Rocket",
        description="Reached 30 words per minute",
        emoji="🚀",
        category=BadgeCategory.SPEED,
        condition=WpmMilestone(wpm=30),
        xp_reward=30,
    ),
    AchievementDefinition(
        id="ninja",
        name="Ninja",
        description="Reached 40 words per minute",
        emoji="🥷",
        category=BadgeCategory.SPEED,
        condition=WpmMilestone(wpm=40),
        xp_reward=50,
    ),
)


# =============================================================================
# EVALUATION
# =============================================================================


def _days_absent(context: AchievementContext) -> Optional[int]:
    if context.last_active_date is None:
        return None
    return days_between(context.last_active_date, context.today or date.today())


def _return_after_absence(cond: ReturnAfterAbsence, ctx: AchievementContext) -> bool:
    # Unknown history never counts as an absence
    days = _days_absent(ctx)
    return days is not None and days >= cond.days


_HANDLERS: Dict[Type, Callable[..., bool]] = {
    FirstLesson: lambda cond, ctx: ctx.completed_lessons_count >= 1,
    PerfectLesson: lambda cond, ctx: ctx.accuracy == 100,
    AccuracyAtLeast: lambda cond, ctx: ctx.accuracy >= cond.min_accuracy,
    NoBackspaceLesson: lambda cond, ctx: ctx.backspace_count == 0,
    DayStreak: lambda cond, ctx: ctx.streak >= cond.days,
    ModulesTried: lambda cond, ctx: len(ctx.modules_visited) >= cond.count,
    FocusDuration: lambda cond, ctx: ctx.duration_ms >= cond.minutes * 60_000,
    ReturnAfterAbsence: _return_after_absence,
    WpmMilestone: lambda cond, ctx: ctx.wpm >= cond.wpm,
    LessonsCompleted: lambda cond, ctx: ctx.completed_lessons_count >= cond.count,
}


def check_badge_earned(
    definition: AchievementDefinition, context: AchievementContext
) -> bool:
    """True if the badge's condition holds for the context."""
    handler = _HANDLERS.get(type(definition.condition))
    if handler is None:
        raise TypeError(
            f"No evaluator for badge condition {definition.condition!r} "
            f"(badge {definition.id})"
        )
    return handler(definition.condition, context)


def check_all_badges(
    context: AchievementContext,
    definitions: Sequence[AchievementDefinition] = BADGE_DEFINITIONS,
) -> List[AchievementDefinition]:
    """Every badge whose condition currently holds, in catalog order."""
    return [badge for badge in definitions if check_badge_earned(badge, context)]


def get_newly_earned_badges(
    context: AchievementContext,
    already_earned_ids: Iterable[str],
    definitions: Sequence[AchievementDefinition] = BADGE_DEFINITIONS,
) -> List[AchievementDefinition]:
    """Badges that hold now and are not in the caller's ledger yet."""
    already = set(already_earned_ids)
    return [
        badge for badge in check_all_badges(context, definitions) if badge.id not in already
    ]


def get_badge(badge_id: str) -> Optional[AchievementDefinition]:
    """Look up a catalog badge by id."""
    for badge in BADGE_DEFINITIONS:
        if badge.id == badge_id:
            return badge
    return None
