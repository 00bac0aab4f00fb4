import os
from unittest.mock import patch

from calchub.core.config import Settings, settings


class TestSettings:
    """Test suite for configuration management."""

    def test_settings_initialization(self):
        """Test that settings initialize with default values."""
        assert settings.API_VERSION == "1.0"
        assert settings.JWT_ALGORITHM == "HS256"
        assert settings.DEFAULT_LOCALE == "en"
        assert settings.HISTORY_PAGE_SIZE == 20
        assert settings.HISTORY_MAX_ENTRIES == 100
        assert settings.TRACKING_ENABLED is True

    def test_supported_locales(self):
        """Test the five catalog languages are supported."""
        assert settings.SUPPORTED_LOCALES == ["en", "es", "pt", "fr", "de"]
        assert settings.DEFAULT_LOCALE in settings.SUPPORTED_LOCALES

    def test_is_supported_locale(self):
        """Test locale support checks."""
        assert settings.is_supported_locale("es") is True
        assert settings.is_supported_locale("ja") is False
        assert settings.is_supported_locale("") is False
        assert settings.is_supported_locale(None) is False

    def test_environment_variable_override(self):
        """Test that environment variables override default settings."""
        test_env = {
            "HISTORY_MAX_ENTRIES": "5",
            "TRACKING_ENABLED": "false",
            "SUPPORTED_LOCALES": '["en", "es"]',
            "CORS_ORIGINS": '["https://example.com"]',
        }
        with patch.dict(os.environ, test_env):
            overridden = Settings()

        assert overridden.HISTORY_MAX_ENTRIES == 5
        assert overridden.TRACKING_ENABLED is False
        assert overridden.SUPPORTED_LOCALES == ["en", "es"]
        assert overridden.CORS_ORIGINS == ["https://example.com"]

    def test_cors_origins_is_list(self):
        """Test CORS origins parse to a list."""
        assert isinstance(settings.CORS_ORIGINS, list)
        assert len(settings.CORS_ORIGINS) > 0
