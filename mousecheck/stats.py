"""Aggregate statistics over the stored window history."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .database.db import get_session
from .database.models import WindowRecord
from .monitor.engine import OutcomeKind


@dataclass
class OutcomeSummary:
    """Snapshot of everything recorded so far."""

    total_windows: int = 0
    counts: dict[OutcomeKind, int] = field(
        default_factory=lambda: {kind: 0 for kind in OutcomeKind}
    )
    success_rate: float = 0.0
    # First-click latency, milliseconds from window open
    mean_latency_ms: float | None = None
    median_latency_ms: float | None = None
    p90_latency_ms: float | None = None


def load_summary() -> OutcomeSummary:
    """Run the history queries in a single session and summarise them."""
    summary = OutcomeSummary()

    with get_session() as db:
        rows = db.query(WindowRecord.outcome, WindowRecord.first_click_ms).all()

    if not rows:
        return summary

    summary.total_windows = len(rows)
    for outcome, _ in rows:
        summary.counts[OutcomeKind(outcome)] += 1
    summary.success_rate = (
        summary.counts[OutcomeKind.SUCCESS] / summary.total_windows
    )

    latencies = np.array(
        [ms for _, ms in rows if ms is not None], dtype=np.float64
    )
    if latencies.size:
        summary.mean_latency_ms = float(np.mean(latencies))
        summary.median_latency_ms = float(np.median(latencies))
        summary.p90_latency_ms = float(np.percentile(latencies, 90))

    return summary


def recent_windows(limit: int = 20) -> list[WindowRecord]:
    """Newest records first."""
    with get_session() as db:
        return (
            db.query(WindowRecord)
            .order_by(WindowRecord.id.desc())
            .limit(limit)
            .all()
        )
