"""Phase-cycling click monitor for MouseCheck.

Phases
------
IDLE          No cycle running.
ALLOWING      Clicks are accepted and counted (the "window").
PROHIBITING   Clicks are dropped; the window's outcome stays visible.

Transitions
-----------
IDLE → ALLOWING                     (start_cycle / set_auto_cycling(True))
ALLOWING → PROHIBITING              (window duration elapsed)
PROHIBITING → ALLOWING              (duration elapsed, auto-cycling on)
PROHIBITING → IDLE                  (duration elapsed, auto-cycling off)
Any → IDLE                          (stop_cycle)

Every phase runs for its full configured duration.  A second click in a
window records ``MULTIPLE_EVENTS`` immediately and latches the window as
interrupted, but the clock keeps running so the prohibiting phase that
follows is never shortened or skipped.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from PyQt6.QtCore import QObject, Qt, QTimer, pyqtSignal, pyqtSlot


logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class Phase(Enum):
    IDLE = "idle"
    ALLOWING = "allowing"
    PROHIBITING = "prohibiting"


class OutcomeKind(Enum):
    SUCCESS = "success"
    NO_EVENT = "no_event"
    MULTIPLE_EVENTS = "multiple_events"


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_ALLOWING_DURATION = 3.0  # seconds
DEFAULT_PROHIBITING_DURATION = 2.0
TICK_MS = 100  # poll interval while a phase is running


# ── value types ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ValidationOutcome:
    """Classified result of one allowing window."""

    kind: OutcomeKind
    count: int

    @classmethod
    def classify(cls, count: int) -> ValidationOutcome:
        if count == 0:
            return cls(OutcomeKind.NO_EVENT, 0)
        if count == 1:
            return cls(OutcomeKind.SUCCESS, 1)
        return cls(OutcomeKind.MULTIPLE_EVENTS, count)

    @property
    def is_error(self) -> bool:
        return self.kind != OutcomeKind.SUCCESS

    @property
    def message(self) -> str:
        if self.kind == OutcomeKind.NO_EVENT:
            return "No click detected during the allowed period"
        if self.kind == OutcomeKind.MULTIPLE_EVENTS:
            return (
                f"Multiple clicks detected ({self.count}) "
                "- only 1 click allowed"
            )
        return "Click registered"


@dataclass(frozen=True)
class CycleSnapshot:
    """Read-only view of the controller for presentation code."""

    phase: Phase
    event_count: int
    last_result: ValidationOutcome | None
    auto_cycling: bool


def _to_ms(seconds: float) -> int:
    return int(round(seconds * 1000))


# ── controller ────────────────────────────────────────────────────────────


class CycleController(QObject):
    """Drives the allowing/prohibiting cycle and validates each window.

    All state lives on the thread that owns the controller.  The public
    slots return immediately; work happens on ``QTimer`` ticks.  Stopping
    the timer is how an in-flight cycle is cancelled, so at most one
    cycle runs per controller.

    Signals
    -------
    phase_changed(phase: Phase)
        Emitted on every phase transition.
    event_count_changed(count: int)
        Emitted when a click is counted and when the count is reset.
    result_changed(result: ValidationOutcome | None)
        Emitted when ``last_result`` is set or cleared.
    auto_cycling_changed(enabled: bool)
        Emitted when the auto-cycling flag flips.
    tick(remaining_ms: int)
        Emitted every ``TICK_MS`` while a phase is running.
    window_completed(data: dict)
        Emitted when an allowing window closes.  Keys: ``outcome``,
        ``click_count``, ``start_time``, ``end_time``,
        ``allowing_duration``, ``prohibiting_duration``,
        ``first_click_ms``, ``db_record_id``.
    """

    phase_changed = pyqtSignal(object)
    event_count_changed = pyqtSignal(int)
    result_changed = pyqtSignal(object)
    auto_cycling_changed = pyqtSignal(bool)
    tick = pyqtSignal(int)
    window_completed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        db_enabled: bool = True,
        stop_on_error: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(parent)

        # ── configuration ─────────────────────────────────────────────
        self._allowing_duration: float = DEFAULT_ALLOWING_DURATION
        self._prohibiting_duration: float = DEFAULT_PROHIBITING_DURATION
        self._db_enabled: bool = db_enabled
        self._stop_on_error: bool = stop_on_error

        # ── cycle state ───────────────────────────────────────────────
        self._phase: Phase = Phase.IDLE
        self._event_count: int = 0
        self._last_result: ValidationOutcome | None = None
        self._auto_cycling: bool = False
        self._interrupt_requested: bool = False
        # Bumped whenever a cycle starts or is torn down; a transition
        # that sees it change under a signal emit stops there.
        self._generation: int = 0

        # ── current phase clock ───────────────────────────────────────
        self._clock = clock
        self._deadline: float = 0.0
        self._remaining_ms: int = 0
        self._phase_duration_ms: int = 0
        self._window_start: datetime | None = None
        self._first_click_at: datetime | None = None

        # ── Qt timer ──────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._qt_timer.setInterval(TICK_MS)
        self._qt_timer.timeout.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def event_count(self) -> int:
        """Clicks counted in the current (or last) allowing window."""
        return self._event_count

    @property
    def last_result(self) -> ValidationOutcome | None:
        return self._last_result

    @property
    def auto_cycling(self) -> bool:
        return self._auto_cycling

    @property
    def is_running(self) -> bool:
        return self._phase != Phase.IDLE

    @property
    def remaining_ms(self) -> int:
        """Milliseconds left in the running phase (0 when idle)."""
        return self._remaining_ms

    @property
    def phase_duration_ms(self) -> int:
        return self._phase_duration_ms

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current phase."""
        if self._phase_duration_ms <= 0:
            return 0.0
        elapsed = self._phase_duration_ms - self._remaining_ms
        return max(0.0, min(1.0, elapsed / self._phase_duration_ms))

    @property
    def allowing_duration(self) -> float:
        return self._allowing_duration

    @allowing_duration.setter
    def allowing_duration(self, seconds: float) -> None:
        """Takes effect at the start of the next allowing phase."""
        if seconds <= 0:
            raise ValueError(f"allowing_duration must be positive, got {seconds}")
        self._allowing_duration = float(seconds)

    @property
    def prohibiting_duration(self) -> float:
        return self._prohibiting_duration

    @prohibiting_duration.setter
    def prohibiting_duration(self, seconds: float) -> None:
        """Takes effect at the start of the next prohibiting phase."""
        if seconds <= 0:
            raise ValueError(
                f"prohibiting_duration must be positive, got {seconds}"
            )
        self._prohibiting_duration = float(seconds)

    @property
    def stop_on_error(self) -> bool:
        return self._stop_on_error

    @stop_on_error.setter
    def stop_on_error(self, value: bool) -> None:
        self._stop_on_error = value

    def snapshot(self) -> CycleSnapshot:
        return CycleSnapshot(
            phase=self._phase,
            event_count=self._event_count,
            last_result=self._last_result,
            auto_cycling=self._auto_cycling,
        )

    def apply_settings(self, settings) -> None:
        """Copy durations and the stop-on-error flag from ``Settings``."""
        self.allowing_duration = settings.allowing_duration
        self.prohibiting_duration = settings.prohibiting_duration
        self.stop_on_error = settings.stop_on_error

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    @pyqtSlot()
    def register_event(self) -> None:
        """Count a click.  Dropped silently outside the allowing phase."""
        if self._phase != Phase.ALLOWING:
            return

        generation = self._generation
        self._event_count += 1
        count = self._event_count
        if count == 1:
            self._first_click_at = datetime.now()
        if count > 1:
            self._interrupt_requested = True

        self.event_count_changed.emit(count)
        if self._generation != generation:
            return

        if count > 1:
            # The window keeps running; only the outcome is settled early.
            self._set_result(ValidationOutcome.classify(self._event_count))

    @pyqtSlot(bool)
    def set_auto_cycling(self, enabled: bool) -> None:
        """Turn auto-cycling on or off.

        Enabling from IDLE starts a repeating cycle.  Enabling while a
        cycle runs only makes it chain.  Disabling lets the running cycle
        finish and settle in IDLE.
        """
        if enabled == self._auto_cycling:
            return
        self._auto_cycling = enabled
        self.auto_cycling_changed.emit(enabled)
        logger.debug("Auto-cycling %s", "enabled" if enabled else "disabled")

        if enabled and self._auto_cycling and self._phase == Phase.IDLE:
            self._begin_cycle()

    @pyqtSlot()
    def toggle_auto_cycling(self) -> None:
        self.set_auto_cycling(not self._auto_cycling)

    @pyqtSlot()
    def start_cycle(self) -> None:
        """Run one non-repeating cycle.  Only valid from IDLE."""
        if self._phase != Phase.IDLE:
            return
        self._begin_cycle()

    @pyqtSlot()
    def stop_cycle(self) -> None:
        """Cancel whatever is running and return to a clean IDLE."""
        self._qt_timer.stop()
        self._generation += 1
        if self._phase != Phase.IDLE:
            logger.debug("Cycle cancelled during %s", self._phase.value)
        if self._auto_cycling:
            self._auto_cycling = False
            self.auto_cycling_changed.emit(False)
        self._reset_state()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — phase mechanics
    # ══════════════════════════════════════════════════════════════════

    def _begin_cycle(self) -> None:
        self._qt_timer.stop()
        self._generation += 1
        generation = self._generation

        self._event_count = 0
        self._interrupt_requested = False
        self._first_click_at = None
        self._window_start = datetime.now()

        self.event_count_changed.emit(0)
        if self._generation != generation:
            return
        self._set_result(None)
        if self._generation != generation:
            return
        self._begin_phase(Phase.ALLOWING, self._allowing_duration)

    def _begin_phase(self, phase: Phase, seconds: float) -> None:
        self._deadline = self._clock() + seconds
        self._remaining_ms = _to_ms(seconds)
        self._phase_duration_ms = self._remaining_ms
        # Timer runs before observers hear of the phase, so a stop from
        # a phase_changed slot also halts it.
        self._qt_timer.setInterval(max(1, min(TICK_MS, self._remaining_ms)))
        self._qt_timer.start()
        self._set_phase(phase)

    def _on_tick(self) -> None:
        if self._phase == Phase.IDLE:
            self._qt_timer.stop()
            return
        generation = self._generation

        self._remaining_ms = max(0, _to_ms(self._deadline - self._clock()))
        self.tick.emit(self._remaining_ms)
        if self._generation != generation:
            return

        if self._remaining_ms <= 0:
            self._finish_phase()
        else:
            self._qt_timer.setInterval(min(TICK_MS, self._remaining_ms))

    def _finish_phase(self) -> None:
        self._qt_timer.stop()
        generation = self._generation
        if self._phase == Phase.ALLOWING:
            self._close_window()
            if self._generation != generation or self._phase != Phase.ALLOWING:
                return
            self._begin_phase(Phase.PROHIBITING, self._prohibiting_duration)
        elif self._phase == Phase.PROHIBITING:
            self._finish_cycle()

    def _close_window(self) -> None:
        generation = self._generation
        count = self._event_count
        if self._interrupt_requested and self._last_result is not None:
            outcome = self._last_result
        else:
            outcome = ValidationOutcome.classify(count)
        end_time = datetime.now()

        first_click_ms: float | None = None
        if self._first_click_at is not None and self._window_start is not None:
            delta = self._first_click_at - self._window_start
            first_click_ms = delta.total_seconds() * 1000.0

        if outcome.is_error:
            logger.info("Window closed: %s", outcome.message)
        else:
            logger.info("Window closed: success")

        record_id: int | None = None
        if self._db_enabled:
            record_id = self._persist_window(outcome, end_time, first_click_ms)
        data = {
            "outcome": outcome,
            "click_count": count,
            "start_time": self._window_start,
            "end_time": end_time,
            "allowing_duration": self._phase_duration_ms / 1000.0,
            "prohibiting_duration": self._prohibiting_duration,
            "first_click_ms": first_click_ms,
            "db_record_id": record_id,
        }

        self._set_result(outcome)
        if self._generation != generation:
            return
        self.window_completed.emit(data)

    def _finish_cycle(self) -> None:
        generation = self._generation
        if (
            self._auto_cycling
            and self._stop_on_error
            and self._last_result is not None
            and self._last_result.is_error
        ):
            logger.info("Stopping auto-cycling after error outcome")
            self._auto_cycling = False
            self.auto_cycling_changed.emit(False)
            if self._generation != generation:
                return

        if self._auto_cycling:
            self._begin_cycle()
        else:
            self._reset_state()

    def _reset_state(self) -> None:
        self._qt_timer.stop()
        self._generation += 1
        generation = self._generation

        self._deadline = 0.0
        self._remaining_ms = 0
        self._phase_duration_ms = 0
        self._window_start = None
        self._first_click_at = None
        self._interrupt_requested = False
        self._event_count = 0

        self.event_count_changed.emit(0)
        if self._generation != generation:
            return
        self._set_result(None)
        if self._generation != generation:
            return
        self._set_phase(Phase.IDLE)

    def _set_phase(self, new_phase: Phase) -> None:
        if new_phase != self._phase:
            logger.debug("Phase %s -> %s", self._phase.value, new_phase.value)
        self._phase = new_phase
        self.phase_changed.emit(new_phase)

    def _set_result(self, result: ValidationOutcome | None) -> None:
        if result == self._last_result:
            return
        self._last_result = result
        self.result_changed.emit(result)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — database persistence
    # ══════════════════════════════════════════════════════════════════

    def _persist_window(
        self,
        outcome: ValidationOutcome,
        end_time: datetime,
        first_click_ms: float | None,
    ) -> int | None:
        """Store the closed window.  A failed write is logged and skipped."""
        from sqlalchemy.exc import SQLAlchemyError

        from ..database.db import get_session
        from ..database.models import WindowRecord

        try:
            with get_session() as db:
                record = WindowRecord(
                    start_time=self._window_start,
                    end_time=end_time,
                    allowing_duration=self._phase_duration_ms / 1000.0,
                    prohibiting_duration=self._prohibiting_duration,
                    click_count=self._event_count,
                    outcome=outcome.kind.value,
                    first_click_ms=first_click_ms,
                )
                db.add(record)
                db.flush()
                return record.id
        except SQLAlchemyError:
            logger.exception("Could not store window outcome")
            return None
