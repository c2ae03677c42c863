from __future__ import annotations

import os
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Inventory API"
    ENV: str = "dev"
    API_PREFIX: str = "/api"
    DATABASE_URL: str | None = None

    # Read-through cache
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_BACKEND: str = "redis"  # Options: redis, memory
    CACHE_TTL_SECONDS: int = 600
    CACHE_KEY_PREFIX: str = "inventory"

    # Listing defaults
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    CORS_ALLOW_METHODS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "plain"
    SENTRY_DSN: str | None = None

    # Allow scripts/seed_data.py to load demo categories, suppliers and products
    SEED_SAMPLE_DATA: bool = False

    @field_validator("CACHE_BACKEND", mode="before")
    @classmethod
    def normalize_cache_backend(cls, v):
        """Accept any casing for the cache backend name."""
        if v is None:
            return "redis"
        value = str(v).strip().lower()
        if value not in {"redis", "memory"}:
            raise ValueError(f"Unsupported CACHE_BACKEND: {v}")
        return value

    @model_validator(mode="after")
    def _validate_required_fields(self) -> BaseAppSettings:
        # Convert Heroku's postgres:// URL to postgresql://
        if self.DATABASE_URL and self.DATABASE_URL.startswith("postgres://"):
            self.DATABASE_URL = self.DATABASE_URL.replace("postgres://", "postgresql://", 1)

        if self.ENV.lower() == "prod":
            missing = [name for name in ("DATABASE_URL", "REDIS_URL") if not getattr(self, name)]
            if missing:
                raise ValueError(f"Missing required production settings: {', '.join(missing)}")
            if self.SEED_SAMPLE_DATA:
                raise ValueError("SEED_SAMPLE_DATA must not be enabled in production")
        return self


class DevSettings(BaseAppSettings):
    ENV: str = "dev"
    DATABASE_URL: str = "sqlite:///./inventory_dev.db"
    CACHE_BACKEND: str = "memory"


class TestSettings(BaseAppSettings):
    ENV: str = "test"
    DATABASE_URL: str = "sqlite:///:memory:"
    CACHE_BACKEND: str = "memory"


class ProdSettings(BaseAppSettings):
    ENV: str = "prod"
    CORS_ALLOW_CREDENTIALS: bool = True
    LOG_FORMAT: str = "json"


_ENV_TO_SETTINGS: dict[str, type[BaseAppSettings]] = {
    "dev": DevSettings,
    "development": DevSettings,
    "test": TestSettings,
    "testing": TestSettings,
    "prod": ProdSettings,
    "production": ProdSettings,
}


@lru_cache
def get_settings() -> BaseAppSettings:
    env_name = os.getenv("APP_ENV") or os.getenv("ENV") or "dev"
    env = env_name.lower()
    settings_cls = _ENV_TO_SETTINGS.get(env, DevSettings)
    return settings_cls()


settings = get_settings()
