# ABOUTME: Shared keystroke event model, configuration and helpers for the typing coach
import json
import logging
import math
from dataclasses import dataclass, asdict
from datetime import date
from pathlib import Path
from typing import Dict, List, Any, Union

import yaml


@dataclass(frozen=True)
class KeystrokeEvent:
    """One recorded key press compared against its expected character."""

    expected: str
    actual: str
    is_correct: bool
    code: str
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KeystrokeEvent":
        """Create from dictionary; is_correct is always derived from the characters."""
        expected = data["expected"]
        actual = data["actual"]
        return cls(
            expected=expected,
            actual=actual,
            is_correct=expected == actual,
            code=data["code"],
            timestamp=float(data["timestamp"]),
        )


DEFAULT_CONFIG: Dict[str, Any] = {
    "metrics": {
        "chars_per_word": 5.5,
        "realtime_window_ms": 5000,
        "weak_key_min_attempts": 3,
    },
    "lesson": {
        "target_wpm": 10,
        "target_accuracy": 80,
    },
    "indicators": {
        "pause_threshold_ms": 10000,
    },
    "output": {
        "log_level": "INFO",
    },
}


class ConfigManager:
    """Configuration management with validation."""

    def __init__(self, config_path: Union[str, Path] = "config.yaml"):
        self.config_path = Path(config_path)
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration, layering the file over the defaults."""
        try:
            with open(self.config_path, "r") as f:
                loaded = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logging.warning(f"Config file {self.config_path} not found, using defaults")
            return self._default_config()
        except yaml.YAMLError as e:
            logging.error(f"Error parsing config file: {e}")
            return self._default_config()

        if not isinstance(loaded, dict):
            logging.error(f"Config file {self.config_path} is not a mapping, using defaults")
            return self._default_config()
        return _merge(self._default_config(), loaded)

    def _default_config(self) -> Dict[str, Any]:
        """Default configuration values."""
        return json.loads(json.dumps(DEFAULT_CONFIG))

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with dot notation."""
        keys = key.split(".")
        value = self.config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_events(path: Union[str, Path]) -> List[KeystrokeEvent]:
    """Load a JSON list of keystroke events, skipping malformed records."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logging.error(f"Error parsing keystroke log {path}: {e}")
        return []

    if not isinstance(data, list):
        logging.error(f"Keystroke log {path} is not a list of events")
        return []

    events = []
    for index, item in enumerate(data):
        try:
            events.append(KeystrokeEvent.from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            logging.error(f"Skipping malformed keystroke #{index} in {path}: {e}")

    return sorted(events, key=lambda x: x.timestamp)


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


def days_between(earlier: date, later: date) -> int:
    """Whole calendar days from earlier to later."""
    return (later - earlier).days
