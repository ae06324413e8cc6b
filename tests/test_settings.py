"""Tests for settings defaults, clamping, and JSON persistence."""

from __future__ import annotations

import json

import pytest

from mousecheck.settings import (
    Settings, load_settings, save_settings, clamp_duration,
    MIN_DURATION, MAX_DURATION,
)


# ═══════════════════════════════════════════════════════════════════════
#  DEFAULTS
# ═══════════════════════════════════════════════════════════════════════


class TestSettingsDefaults:
    def test_allowing_duration(self):
        assert Settings().allowing_duration == 3.0

    def test_prohibiting_duration(self):
        assert Settings().prohibiting_duration == 2.0

    def test_stop_on_error_off(self):
        assert Settings().stop_on_error is False

    def test_total_cycle_time(self):
        s = Settings(allowing_duration=4.5, prohibiting_duration=2.0)
        assert s.total_cycle_time == 6.5


# ═══════════════════════════════════════════════════════════════════════
#  CLAMPING
# ═══════════════════════════════════════════════════════════════════════


class TestClampDuration:
    @pytest.mark.parametrize("value, expected", [
        (3.0, 3.0),
        (3.2, 3.0),
        (3.3, 3.5),
        (0.2, MIN_DURATION),
        (42, MAX_DURATION),
        (10.0, 10.0),
    ])
    def test_clamp(self, value, expected):
        assert clamp_duration(value) == expected


# ═══════════════════════════════════════════════════════════════════════
#  PERSISTENCE
# ═══════════════════════════════════════════════════════════════════════


class TestSettingsPersistence:
    def test_round_trip(self, tmp_path, monkeypatch):
        """save → load produces identical settings."""
        path = tmp_path / "settings.json"
        monkeypatch.setattr("mousecheck.settings.SETTINGS_PATH", path)
        monkeypatch.setattr("mousecheck.settings.APP_SUPPORT_DIR", tmp_path)
        original = Settings(
            allowing_duration=5.5, prohibiting_duration=1.0, stop_on_error=True,
        )
        save_settings(original)
        assert load_settings() == original

    def test_missing_file_returns_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setattr(
            "mousecheck.settings.SETTINGS_PATH",
            tmp_path / "nonexistent.json",
        )
        assert load_settings() == Settings()

    def test_invalid_json_returns_defaults(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.json"
        path.write_text("NOT VALID JSON", encoding="utf-8")
        monkeypatch.setattr("mousecheck.settings.SETTINGS_PATH", path)
        assert load_settings() == Settings()

    def test_non_object_json_returns_defaults(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        monkeypatch.setattr("mousecheck.settings.SETTINGS_PATH", path)
        assert load_settings() == Settings()

    def test_extra_keys_ignored(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.json"
        data = {"allowing_duration": 6.0, "unknown_future_key": True}
        path.write_text(json.dumps(data), encoding="utf-8")
        monkeypatch.setattr("mousecheck.settings.SETTINGS_PATH", path)
        s = load_settings()
        assert s.allowing_duration == 6.0
        assert not hasattr(s, "unknown_future_key")

    def test_out_of_range_durations_clamped(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.json"
        data = {"allowing_duration": 0.1, "prohibiting_duration": 99}
        path.write_text(json.dumps(data), encoding="utf-8")
        monkeypatch.setattr("mousecheck.settings.SETTINGS_PATH", path)
        s = load_settings()
        assert s.allowing_duration == MIN_DURATION
        assert s.prohibiting_duration == MAX_DURATION
