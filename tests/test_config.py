from __future__ import annotations

import logging
from datetime import UTC

import pytest
from pydantic import ValidationError

from finance_analytics import AnalyticsSettings, ConfigurationError, load_settings
from finance_analytics.config import resolve_timezone


def test_defaults_when_environment_is_empty():
    settings = load_settings({})
    assert settings == AnalyticsSettings()
    assert settings.tz is UTC
    assert settings.history_months == 5


def test_reads_environment_variables(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("FA_TIMEZONE", "America/Lima")
    monkeypatch.setenv("FA_HISTORY_MONTHS", "11")
    monkeypatch.setenv("FINANCE_ANALYTICS_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.timezone == "America/Lima"
    assert str(settings.tz) == "America/Lima"
    assert settings.history_months == 11
    assert settings.log_level == "debug"


def test_blank_values_fall_back_to_defaults():
    settings = load_settings({"FA_TIMEZONE": "  ", "FA_HISTORY_MONTHS": ""})
    assert settings.timezone == "UTC"
    assert settings.history_months == 5


@pytest.mark.parametrize(
    "environ",
    [
        {"FA_TIMEZONE": "Mars/Olympus_Mons"},
        {"FA_HISTORY_MONTHS": "-1"},
        {"FA_HISTORY_MONTHS": "six"},
        {"FINANCE_ANALYTICS_LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_values_raise_configuration_error(environ):
    with pytest.raises(ConfigurationError):
        load_settings(environ)


def test_resolve_timezone():
    assert resolve_timezone(None) is UTC
    assert resolve_timezone("utc") is UTC
    assert str(resolve_timezone("Europe/Madrid")) == "Europe/Madrid"
    with pytest.raises(ConfigurationError):
        resolve_timezone("Nowhere/Special")


def test_settings_are_immutable():
    settings = AnalyticsSettings(log_level=logging.WARNING)
    with pytest.raises(ValidationError):
        settings.history_months = 2  # type: ignore[misc]
