from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "StoreLink Admin"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database (in-memory unless overridden)
    # ==============================
    DATABASE_URL: str = "sqlite://"
    SEED_ON_STARTUP: bool = True

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Catalog & Mappings
    # ==============================
    DEFAULT_ACTOR: str = "srikanth varma"
    DEFAULT_STOCK_LEVEL: int = 1000
    ENFORCE_UNIQUE_SPIDS: bool = False

    # ==============================
    # Simulated storefront calls
    # ==============================
    FULFILLMENT_SYNC_DELAY_SECONDS: float = 1.5
    STORE_SYNC_DELAY_SECONDS: float = 2.0

    # ==============================
    # Gemini
    # ==============================
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_TEXT_MODEL: str = "gemini-3-flash-preview"
    GEMINI_IMAGE_MODEL: str = "gemini-2.5-flash-image"
    GEMINI_REQUEST_TIMEOUT_SECONDS: int = 45


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
