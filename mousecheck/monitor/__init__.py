"""Monitor package."""

from .engine import (
    CycleController,
    CycleSnapshot,
    Phase,
    OutcomeKind,
    ValidationOutcome,
    DEFAULT_ALLOWING_DURATION,
    DEFAULT_PROHIBITING_DURATION,
    TICK_MS,
)
from .click_log import ClickLogger, MouseClick

__all__ = [
    "CycleController",
    "CycleSnapshot",
    "Phase",
    "OutcomeKind",
    "ValidationOutcome",
    "DEFAULT_ALLOWING_DURATION",
    "DEFAULT_PROHIBITING_DURATION",
    "TICK_MS",
    "ClickLogger",
    "MouseClick",
]
