#!/usr/bin/env python3
"""Tests for Settings."""
from datetime import date

import pytest
from fleet import ConfigError, Settings


class TestSettingsFromEnv:
    """Tests for Settings.from_env."""

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.due_soon_days == 30
        assert settings.today is None
        assert settings.log_level == "WARNING"

    def test_values(self):
        settings = Settings.from_env(
            {
                "FLEET_DUE_SOON_DAYS": "45",
                "FLEET_TODAY": "2025-03-15",
                "FLEET_LOG_LEVEL": "debug",
            }
        )
        assert settings.due_soon_days == 45
        assert settings.today == date(2025, 3, 15)
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "env",
        [
            {"FLEET_DUE_SOON_DAYS": "soon"},
            {"FLEET_DUE_SOON_DAYS": "-1"},
            {"FLEET_TODAY": "15.03.2025."},
            {"FLEET_LOG_LEVEL": "LOUD"},
        ],
    )
    def test_bad_values_raise(self, env):
        with pytest.raises(ConfigError):
            Settings.from_env(env)


class TestCurrentDate:
    """Tests for Settings.current_date."""

    def test_fixed_today(self):
        assert Settings(today=date(2025, 3, 15)).current_date() == date(2025, 3, 15)

    def test_system_date(self):
        assert Settings().current_date() == date.today()
