"""Tests for engine settings."""

import pytest

from condition_engine.core.config import Settings, get_settings
from condition_engine.rules.context import CoercionPolicy, ComparisonOption


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that settings default to the plain comparison policy."""
        monkeypatch.delenv("CONDITION_ENGINE_COMPARISON_OPTION", raising=False)
        settings = Settings(_env_file=None)

        assert settings.comparison_option is ComparisonOption.DEFAULT
        assert settings.coercion_policy == CoercionPolicy()
        assert settings.register_builtin_transforms is True

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that prefixed environment variables override the defaults."""
        monkeypatch.setenv("CONDITION_ENGINE_COMPARISON_OPTION", "CASE_INSENSITIVE")
        monkeypatch.setenv("CONDITION_ENGINE_COERCE_NUMERIC_STRINGS", "false")
        monkeypatch.setenv("CONDITION_ENGINE_ENV", "prod")

        settings = Settings(_env_file=None)

        assert settings.comparison_option is ComparisonOption.CASE_INSENSITIVE
        assert settings.coercion_policy.numeric_strings is False
        assert settings.env == "prod"
        assert settings.is_dev is False

    def test_get_settings_is_cached(self) -> None:
        """Test that get_settings returns one cached instance."""
        assert get_settings() is get_settings()
