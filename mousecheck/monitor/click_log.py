"""In-memory click log with per-button timing.

Each click remembers how long it came after the previous click of the
same button, which makes double-clicks and bounce easy to spot while
tuning the allowing window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MouseClick:
    timestamp: datetime
    x: float
    y: float
    button: str          # "left" | "right" | "other"
    type: str = "down"   # down | up | double
    delta_since_previous_ms: float | None = None

    def describe(self) -> str:
        stamp = self.timestamp.strftime("%H:%M:%S.") + (
            f"{self.timestamp.microsecond // 1000:03d}"
        )
        if self.delta_since_previous_ms is None:
            tail = "first"
        else:
            tail = f"+{self.delta_since_previous_ms:.1f} ms"
        return (
            f"{stamp} - {self.type} ({self.button}) "
            f"at x: {int(self.x)}, y: {int(self.y)} | {tail}"
        )


class ClickLogger:
    """Newest-first list of logged clicks."""

    def __init__(self) -> None:
        self.clicks: list[MouseClick] = []
        self._last_timestamp_per_button: dict[str, datetime] = {}

    def log(self, click: MouseClick) -> MouseClick:
        """Record *click*, filling in its per-button delta."""
        last = self._last_timestamp_per_button.get(click.button)
        delta = None
        if last is not None:
            delta = (click.timestamp - last).total_seconds() * 1000.0
        computed = replace(click, delta_since_previous_ms=delta)

        self._last_timestamp_per_button[click.button] = click.timestamp
        self.clicks.insert(0, computed)
        logger.info("%s", computed.describe())
        return computed

    def clear(self) -> None:
        self.clicks.clear()
        self._last_timestamp_per_button.clear()

    def __len__(self) -> int:
        return len(self.clicks)
