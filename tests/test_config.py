from __future__ import annotations

import importlib

import pytest

from config import get_settings_module


@pytest.mark.parametrize(
    "env, expected",
    [
        (None, "config.development"),
        ("production", "config.production"),
        ("PROD", "config.production"),
        ("testing", "config.testing"),
        ("staging", "config.development"),
    ],
)
def test_settings_module_from_app_env(monkeypatch, env, expected):
    if env is None:
        monkeypatch.delenv("APP_ENV", raising=False)
    else:
        monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == expected


def test_alert_thresholds_read_from_environment(monkeypatch):
    monkeypatch.setenv("ALERT_CONSECUTIVE_THRESHOLD", "4")
    settings = importlib.reload(importlib.import_module("config.development"))
    try:
        assert settings.ALERT_CONSECUTIVE_THRESHOLD == 4
        assert settings.ALERT_MONTHLY_THRESHOLD == 5
    finally:
        monkeypatch.delenv("ALERT_CONSECUTIVE_THRESHOLD")
        importlib.reload(settings)
