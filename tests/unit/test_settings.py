"""Tests for reminder settings and the evaluation day."""

import pytest
from pydantic import ValidationError

from renewals.config import get_settings, reset_settings, today
from renewals.config.settings import ReminderEngineSettings


def test_today_uses_configured_timezone(monkeypatch: pytest.MonkeyPatch):
    # UTC+14 and UTC-11 are always on different calendar days
    monkeypatch.setenv("REMINDER_TIMEZONE", "Pacific/Kiritimati")
    reset_settings()
    ahead = today()

    monkeypatch.setenv("REMINDER_TIMEZONE", "Pacific/Pago_Pago")
    reset_settings()
    behind = today()

    assert (ahead - behind).days in (1, 2)


def test_unknown_timezone_rejected():
    with pytest.raises(ValidationError, match="unknown timezone"):
        ReminderEngineSettings(timezone="Mars/Olympus_Mons")


def test_default_offsets_sorted_descending():
    settings = ReminderEngineSettings(default_offsets=[7, 30, 7])
    assert settings.default_offsets == [30, 7]


def test_tick_interval_bounds(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("REMINDER_TICK_INTERVAL_HOURS", "0")
    reset_settings()
    with pytest.raises(ValidationError):
        get_settings()
