"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/MouseCheck/settings.json

Usage::

    settings = load_settings()
    settings.allowing_duration = 4.5
    save_settings(settings)
    controller.apply_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path


logger = logging.getLogger(__name__)

# Reuse the app-support directory from db.py
APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "MouseCheck"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

MIN_DURATION = 1.0   # seconds
MAX_DURATION = 10.0
DURATION_STEP = 0.5


def clamp_duration(seconds: float) -> float:
    """Snap *seconds* onto the 0.5 s grid inside [1, 10]."""
    snapped = round(float(seconds) / DURATION_STEP) * DURATION_STEP
    return max(MIN_DURATION, min(MAX_DURATION, snapped))


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── phases ────────────────────────────────────────────────────────
    allowing_duration: float = 3.0         # seconds (green phase)
    prohibiting_duration: float = 2.0      # seconds (red phase)

    # ── behavior ──────────────────────────────────────────────────────
    stop_on_error: bool = False

    @property
    def total_cycle_time(self) -> float:
        return self.allowing_duration + self.prohibiting_duration


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            settings = Settings(**filtered)
            settings.allowing_duration = clamp_duration(settings.allowing_duration)
            settings.prohibiting_duration = clamp_duration(
                settings.prohibiting_duration
            )
            return settings
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Could not read %s, using defaults: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
