# ABOUTME: Keyboard heatmap - per-key accuracy aggregated across practice sessions
from dataclasses import dataclass
from typing import Iterable, List

import pandas as pd

from .engine import SessionStats

MIN_ATTEMPTS_FOR_HEAT = 3

# (minimum accuracy, level), checked in order
HEAT_LEVELS = (
    (95, "excellent"),
    (85, "good"),
    (75, "fair"),
    (60, "weak"),
)


@dataclass(frozen=True)
class KeyHeatmapData:
    """Accuracy for one key merged across sessions."""

    char: str
    accuracy: int
    total: int
    correct: int


def aggregate_key_accuracy(sessions: Iterable[SessionStats]) -> List[KeyHeatmapData]:
    """Merge per-key accuracy from several sessions, weakest keys first."""
    rows = [
        {"char": char, "correct": data.correct, "total": data.total}
        for session in sessions
        for char, data in session.key_accuracy.items()
    ]
    if not rows:
        return []

    df = pd.DataFrame(rows)
    totals = df.groupby("char", sort=False)[["correct", "total"]].sum().reset_index()
    # Half-up rounding on the percentage, matching the session engine
    totals["accuracy"] = (totals["correct"] / totals["total"] * 100 + 0.5).where(
        totals["total"] > 0, 100
    )
    totals["accuracy"] = totals["accuracy"].floordiv(1).astype(int)
    totals = totals.sort_values("accuracy", kind="stable")

    return [
        KeyHeatmapData(
            char=row.char,
            accuracy=int(row.accuracy),
            total=int(row.total),
            correct=int(row.correct),
        )
        for row in totals.itertuples(index=False)
    ]


def get_heat_level(accuracy: float, total: int) -> str:
    """Heat bucket for a key; 'none' until it has enough attempts."""
    if total < MIN_ATTEMPTS_FOR_HEAT:
        return "none"
    for minimum, level in HEAT_LEVELS:
        if accuracy >= minimum:
            return level
    return "critical"


def get_weakest_keys(data: Iterable[KeyHeatmapData], count: int) -> List[KeyHeatmapData]:
    """Lowest-accuracy keys that have enough attempts to be rated."""
    eligible = [k for k in data if k.total >= MIN_ATTEMPTS_FOR_HEAT]
    return sorted(eligible, key=lambda k: k.accuracy)[:count]


def get_strongest_keys(data: Iterable[KeyHeatmapData], count: int) -> List[KeyHeatmapData]:
    """Highest-accuracy keys that have enough attempts to be rated."""
    eligible = [k for k in data if k.total >= MIN_ATTEMPTS_FOR_HEAT]
    return sorted(eligible, key=lambda k: k.accuracy, reverse=True)[:count]
