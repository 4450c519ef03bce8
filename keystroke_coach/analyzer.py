# ABOUTME: Session analyzer that runs every engine over a keystroke log, plus the command-line entry point
import json
import logging
import statistics
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .badges import AchievementContext, get_newly_earned_badges
from .emotions import detect_emotional_state
from .engine import (
    SessionStats,
    calculate_realtime_wpm,
    calculate_xp_reward,
    compute_session_stats,
    find_weak_keys,
    is_lesson_complete,
)
from .feedback import get_emotional_feedback, get_lesson_end_feedback
from .heatmap import aggregate_key_accuracy, get_heat_level
from .indicators import compute_indicators, count_backspaces
from .utils import ConfigManager, KeystrokeEvent, load_events, setup_logging


class SessionAnalyzer:
    """Runs metrics, indicators, classification and feedback for one session."""

    def __init__(self, config_path: Optional[str] = None):
        self.config = ConfigManager(config_path or "config.yaml")
        setup_logging(self.config.get("output.log_level", "INFO"))

        self.chars_per_word = self.config.get("metrics.chars_per_word", 5.5)
        self.realtime_window_ms = self.config.get("metrics.realtime_window_ms", 5000)
        self.min_attempts = self.config.get("metrics.weak_key_min_attempts", 3)
        self.pause_threshold_ms = self.config.get("indicators.pause_threshold_ms", 10000)
        self.target_wpm = self.config.get("lesson.target_wpm", 10)
        self.target_accuracy = self.config.get("lesson.target_accuracy", 80)

    def load_events(self, path: Union[str, Path]) -> List[KeystrokeEvent]:
        """Load a keystroke log for analysis."""
        logging.info(f"Loading keystroke events from {path}...")
        events = load_events(path)
        logging.info(f"Loaded {len(events)} keystroke events")
        return events

    def compute_stats(
        self, events: Sequence[KeystrokeEvent], started_at: float, ended_at: float
    ) -> SessionStats:
        return compute_session_stats(
            events, started_at, ended_at, chars_per_word=self.chars_per_word
        )

    def analyze_intervals(self, events: Sequence[KeystrokeEvent]) -> Dict[str, float]:
        """Distribution of gaps between consecutive keystrokes, in ms."""
        gaps = [b.timestamp - a.timestamp for a, b in zip(events, events[1:])]
        if not gaps:
            return {"mean": 0, "median": 0, "p90": 0, "p95": 0}
        return {
            "mean": statistics.mean(gaps),
            "median": statistics.median(gaps),
            "p90": float(np.percentile(gaps, 90)),
            "p95": float(np.percentile(gaps, 95)),
        }

    def analyze_session(
        self,
        events: Sequence[KeystrokeEvent],
        started_at: float,
        ended_at: float,
        previous_stats: Optional[SessionStats] = None,
        target_wpm: Optional[float] = None,
        target_accuracy: Optional[float] = None,
        streak: int = 0,
    ) -> Dict[str, Any]:
        """Run every engine over a frozen snapshot of the session's events."""
        logging.info("Running session analysis...")

        if not events:
            logging.error("No keystroke events to analyze")
            return {}

        events = tuple(events)
        target_wpm = self.target_wpm if target_wpm is None else target_wpm
        target_accuracy = (
            self.target_accuracy if target_accuracy is None else target_accuracy
        )

        stats = self.compute_stats(events, started_at, ended_at)
        indicators = compute_indicators(
            events,
            stats.duration_ms,
            pause_threshold_ms=self.pause_threshold_ms,
            chars_per_word=self.chars_per_word,
        )
        state = detect_emotional_state(indicators)
        logging.info(
            f"Session: {stats.wpm} WPM, {stats.accuracy}% accuracy, state={state.value}"
        )

        heatmap = [
            {
                "char": key.char,
                "accuracy": key.accuracy,
                "total": key.total,
                "level": get_heat_level(key.accuracy, key.total),
            }
            for key in aggregate_key_accuracy([stats])
        ]

        return {
            "metadata": {
                "analysis_timestamp": datetime.now().isoformat(),
                "total_events": len(events),
                "started_at": started_at,
                "ended_at": ended_at,
            },
            "stats": stats.to_dict(),
            "weak_keys": [
                {"char": k.char, "accuracy": k.accuracy, "total": k.total}
                for k in find_weak_keys(stats, self.min_attempts)
            ],
            "realtime_wpm": calculate_realtime_wpm(
                events, self.realtime_window_ms, chars_per_word=self.chars_per_word
            ),
            "intervals": self.analyze_intervals(events),
            "heatmap": heatmap,
            "indicators": indicators.to_dict(),
            "emotional_state": state.value,
            "emotional_feedback": get_emotional_feedback(state).to_dict(),
            "lesson_feedback": [
                m.to_dict() for m in get_lesson_end_feedback(stats, previous_stats)
            ],
            "lesson_complete": is_lesson_complete(stats, target_wpm, target_accuracy),
            "xp": asdict(
                calculate_xp_reward(stats, target_wpm, target_accuracy, streak)
            ),
        }

    def build_achievement_context(
        self,
        events: Sequence[KeystrokeEvent],
        stats: SessionStats,
        lesson_id: str,
        streak: int = 0,
        completed_lessons_count: int = 0,
        modules_visited: Iterable[str] = (),
        last_active_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> AchievementContext:
        """Combine a session's facts with the caller's progress facts."""
        return AchievementContext(
            wpm=stats.wpm,
            accuracy=stats.accuracy,
            backspace_count=count_backspaces(events),
            duration_ms=stats.duration_ms,
            streak=streak,
            completed_lessons_count=completed_lessons_count,
            lesson_id=lesson_id,
            modules_visited=frozenset(modules_visited),
            last_active_date=last_active_date,
            today=today,
        )

    def export_keystrokes_csv(
        self, events: Sequence[KeystrokeEvent], filename: Union[str, Path]
    ) -> None:
        """Export keystroke data to CSV format."""
        df = pd.DataFrame([event.to_dict() for event in events])
        df.to_csv(filename, index=False)
        logging.info(f"Exported {len(events)} keystrokes to {filename}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the analyzer."""
    import argparse

    parser = argparse.ArgumentParser(description="Typing session analysis and feedback")
    parser.add_argument("events", help="JSON file with the session's keystroke events")
    parser.add_argument(
        "--config", default="config.yaml", help="Configuration file path"
    )
    parser.add_argument("--target-wpm", type=float, help="Lesson target WPM")
    parser.add_argument("--target-accuracy", type=float, help="Lesson target accuracy")
    parser.add_argument("--streak", type=int, default=0, help="Current day streak")
    parser.add_argument("--lesson-id", default="practice", help="Lesson identifier")
    parser.add_argument(
        "--earned", nargs="*", default=[], help="Badge ids already earned"
    )
    parser.add_argument("--export-csv", help="Write the raw keystrokes to this CSV file")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")

    args = parser.parse_args(argv)

    analyzer = SessionAnalyzer(args.config)
    events = analyzer.load_events(args.events)

    if not events:
        print("No keystroke events found in the input file.")
        return 1

    results = analyzer.analyze_session(
        events,
        events[0].timestamp,
        events[-1].timestamp,
        target_wpm=args.target_wpm,
        target_accuracy=args.target_accuracy,
        streak=args.streak,
    )

    stats = analyzer.compute_stats(events, events[0].timestamp, events[-1].timestamp)
    context = analyzer.build_achievement_context(
        events, stats, args.lesson_id, streak=args.streak
    )
    new_badges = get_newly_earned_badges(context, args.earned)
    results["new_badges"] = [badge.to_dict() for badge in new_badges]

    if args.export_csv:
        analyzer.export_keystrokes_csv(events, args.export_csv)

    if args.json:
        print(json.dumps(results, indent=2, ensure_ascii=False))
        return 0

    print("\n=== Session Summary ===")
    print(f"Keystrokes: {results['stats']['total_keystrokes']:,}")
    print(f"WPM: {results['stats']['wpm']}")
    print(f"Accuracy: {results['stats']['accuracy']}%")
    print(f"Emotional state: {results['emotional_state']}")
    print(f"Lesson complete: {'yes' if results['lesson_complete'] else 'no'}")
    print(f"XP earned: {results['xp']['total']}")

    if results["weak_keys"]:
        weakest = results["weak_keys"][0]
        print(f"Weakest key: '{weakest['char']}' ({weakest['accuracy']}%)")

    print("\n=== Feedback ===")
    for message in results["lesson_feedback"]:
        emoji = f"{message['emoji']} " if message["emoji"] else ""
        print(f"  {emoji}{message['text']}")

    if new_badges:
        print("\n=== New Badges ===")
        for badge in new_badges:
            print(f"  {badge.emoji} {badge.name} - {badge.description}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
