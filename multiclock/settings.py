"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/MultiClock/settings.json

Usage::

    settings = load_settings()
    settings.series = 8
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from .timer.errors import InvalidConfigError
from .timer.sequencer import WorkoutConfig


log = logging.getLogger("multiclock.settings")

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "MultiClock"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── last workout ──────────────────────────────────────────────────
    series: int = 5
    work: int = 30                         # seconds
    rest: int = 10
    cooldown: int = 0

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 80                 # 0-100

    # ── power ─────────────────────────────────────────────────────────
    keep_screen_awake: bool = True

    # ── window ────────────────────────────────────────────────────────
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 420
    window_height: int = 640
    always_on_top: bool = False

    def workout_config(self) -> WorkoutConfig:
        """The saved workout as a config.  Not validated."""
        return WorkoutConfig(
            series=self.series,
            work_seconds=self.work,
            rest_seconds=self.rest,
            cooldown_seconds=self.cooldown,
        )

    def remember_workout(self, config: WorkoutConfig) -> None:
        self.series = config.series
        self.work = config.work_seconds
        self.rest = config.rest_seconds
        self.cooldown = config.cooldown_seconds


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return _checked_workout(Settings(**filtered))
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        log.warning("Ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)
    return Settings()


def _checked_workout(settings: Settings) -> Settings:
    """Reset the saved workout to defaults if it is not a valid config."""
    try:
        settings.workout_config().validate()
    except InvalidConfigError as exc:
        log.warning("Ignoring saved workout in %s: %s", SETTINGS_PATH, exc)
        settings.remember_workout(Settings().workout_config())
    return settings


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
