"""Unit tests for settings loading and deployment checks."""

import pytest

from rally.config import Settings
from rally.util.error import ConfigurationError


class TestSettings:
    def test_nested_values_from_environment(self, monkeypatch):
        monkeypatch.setenv("ACTIVITIES__MAX_PARTICIPANTS", "20")
        monkeypatch.setenv("FRIENDS__ONLINE_WINDOW_MINUTES", "5")

        settings = Settings()

        assert settings.activities.max_participants == 20
        assert settings.friends.online_window_minutes == 5
        assert settings.activities.default_days_ahead == 14

    def test_production_urls_use_https(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("HOST", "api.rally.app")
        monkeypatch.setenv("FRONTEND_HOST", "rally.app")

        settings = Settings()

        assert settings.api.base_url == "https://api.rally.app"
        assert settings.api.frontend_url == "https://rally.app"


class TestCheckDeployable:
    """Placeholder secrets are only tolerated locally."""

    def test_development_allows_placeholders(self):
        Settings(environment="development").check_deployable()

    def test_production_lists_every_placeholder(self, monkeypatch):
        monkeypatch.setenv("GEOCODING__API_KEY", "real-key")

        with pytest.raises(ConfigurationError) as exc_info:
            Settings(environment="production").check_deployable()

        assert exc_info.value.problems == [
            "AUTH__JWT_SECRET must be set in production",
            "STORAGE__SERVICE_KEY must be set in production",
        ]
