"""Shared test helpers for MouseCheck."""

from mousecheck.monitor.engine import CycleController, TICK_MS


class FakeClock:
    """Monotonic clock the tests move by hand (whole milliseconds)."""

    def __init__(self, start_ms: int = 1000):
        self.ms = start_ms

    def __call__(self) -> float:
        return self.ms / 1000


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def advance(controller: CycleController, seconds: float) -> None:
    """Move the fake clock forward one tick at a time for *seconds*."""
    for _ in range(int(round(seconds * 1000 / TICK_MS))):
        controller._clock.ms += TICK_MS
        controller._on_tick()


def complete_phase(controller: CycleController) -> None:
    """Fast-complete the current phase by jumping to its deadline."""
    controller._clock.ms = int(round(controller._deadline * 1000))
    controller._on_tick()
