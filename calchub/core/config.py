# calchub/core/config.py
import os
import logging
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

env_path = os.getenv("CALCHUB_ENV_FILE", ".env")
load_dotenv(env_path)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra='ignore', env_file=env_path)

    # API Settings
    API_TITLE: str = "Calchub Calculator API"
    API_VERSION: str = "1.0"
    DEBUG: bool = False
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./calchub.db")
    DATABASE_ECHO: bool = False

    # Security
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # JSON array in env, e.g. ["https://example.com"]
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Localization
    DEFAULT_LOCALE: str = "en"
    SUPPORTED_LOCALES: List[str] = ["en", "es", "pt", "fr", "de"]
    TRANSLATIONS_DIR: Optional[str] = os.getenv("TRANSLATIONS_DIR")

    # History and tracking
    HISTORY_PAGE_SIZE: int = 20
    HISTORY_MAX_ENTRIES: int = 100
    TRACKING_ENABLED: bool = True

    def is_supported_locale(self, locale: Optional[str]) -> bool:
        return bool(locale) and locale in self.SUPPORTED_LOCALES


settings = Settings()

if settings.DEFAULT_LOCALE not in settings.SUPPORTED_LOCALES:
    logger.warning(
        f"DEFAULT_LOCALE '{settings.DEFAULT_LOCALE}' is not in SUPPORTED_LOCALES, adding it"
    )
    settings.SUPPORTED_LOCALES.append(settings.DEFAULT_LOCALE)
