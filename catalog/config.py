"""
Configuration management for the WooCommerce Catalog Mirror
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "WooCommerce Catalog Mirror"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./catalog.db"

    # WooCommerce REST API
    WOOCOMMERCE_URL: str = ""               # e.g. "https://shop.example.com"
    WOOCOMMERCE_CONSUMER_KEY: str = ""      # ck_...
    WOOCOMMERCE_CONSUMER_SECRET: str = ""   # cs_...
    WOOCOMMERCE_PER_PAGE: int = 100         # API maximum
    WOOCOMMERCE_TIMEOUT: float = 30.0       # seconds per request
    WOOCOMMERCE_MAX_RETRIES: int = 3

    # Catalog sync
    SYNC_INTERVAL_MIN: int = 360  # every 6 hours
    SYNC_STARTUP_DELAY_SEC: int = 30
    SYNC_FAIL_FAST: bool = True

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
