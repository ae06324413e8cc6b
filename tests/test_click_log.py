"""Tests for the per-button click log."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

import pytest

from mousecheck.monitor.click_log import ClickLogger, MouseClick


T0 = datetime(2026, 2, 3, 14, 5, 9, 123000)


def _click(offset_ms: float = 0, button: str = "left", x=10.4, y=20.9):
    return MouseClick(
        timestamp=T0 + timedelta(milliseconds=offset_ms),
        x=x, y=y, button=button,
    )


class TestClickLogger:
    def test_first_click_has_no_delta(self):
        log = ClickLogger()
        logged = log.log(_click())
        assert logged.delta_since_previous_ms is None

    def test_delta_per_button(self):
        log = ClickLogger()
        log.log(_click(0, "left"))
        log.log(_click(50, "right"))
        second_left = log.log(_click(250, "left"))
        second_right = log.log(_click(300, "right"))
        assert second_left.delta_since_previous_ms == pytest.approx(250.0)
        assert second_right.delta_since_previous_ms == pytest.approx(250.0)

    def test_newest_first(self):
        log = ClickLogger()
        log.log(_click(0))
        log.log(_click(100))
        assert log.clicks[0].timestamp > log.clicks[1].timestamp
        assert len(log) == 2

    def test_clear_forgets_previous(self):
        log = ClickLogger()
        log.log(_click(0))
        log.clear()
        assert len(log) == 0
        assert log.log(_click(500)).delta_since_previous_ms is None

    def test_log_line(self, caplog):
        log = ClickLogger()
        with caplog.at_level(logging.INFO, logger="mousecheck.monitor.click_log"):
            log.log(_click(0))
            log.log(_click(12.5))
        assert caplog.messages == [
            "14:05:09.123 - down (left) at x: 10, y: 20 | first",
            "14:05:09.135 - down (left) at x: 10, y: 20 | +12.5 ms",
        ]
