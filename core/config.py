"""
Settings for the netcrm API.

Loaded from environment variables and an optional .env file.

Usage:
    from core.config import settings

    engine_url = settings.DATABASE_URL
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./netcrm.db")
    DATABASE_ECHO: bool = Field(default=False)

    # Tokens
    JWT_SECRET: str = Field(default="change-me")
    JWT_ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=7 * 24 * 60)

    # Google sign-in, empty disables POST /api/auth/google
    GOOGLE_CLIENT_ID: Optional[str] = Field(default=None)

    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:5174", "http://localhost:3001"]
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Application metadata
    ENVIRONMENT: str = Field(default="production")
    APP_NAME: str = Field(default="netcrm")
    APP_VERSION: str = Field(default="0.1.0")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
