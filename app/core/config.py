from functools import lru_cache
from typing import Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Load settings from .env file if it exists
        # Environment variables override values from the file
        env_file=".env",
        case_sensitive=True,
    )

    APP_NAME: str = "Auth Service"
    APP_VERSION: str = "1.0.0"

    # Security settings
    # SECRET_KEY has no default: startup fails when it is missing
    # Same key signs and verifies tokens, so anyone holding it can forge identities
    SECRET_KEY: str
    ALGORITHM: str = "HS256"  # JWT signing algorithm - must match in security.py
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60, gt=0)
    # bcrypt cost factor, 2**rounds iterations per hash
    BCRYPT_ROUNDS: int = Field(default=10, ge=4, le=31)

    # CORS origins - string (comma-separated) or list
    CORS_ORIGINS: Union[str, list[str]] = "http://localhost:5173,http://localhost:3000"

    LOG_LEVEL: str = "INFO"

    @field_validator("SECRET_KEY")
    @classmethod
    def secret_key_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("SECRET_KEY must not be empty")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    def get_cors_origins(self) -> list[str]:
        """Parse CORS_ORIGINS string into list"""
        if isinstance(self.CORS_ORIGINS, str):
            return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        return self.CORS_ORIGINS if isinstance(self.CORS_ORIGINS, list) else []


@lru_cache
def get_settings() -> Settings:
    """
    Build settings once per process.

    Raises pydantic's ValidationError when SECRET_KEY is absent, which stops
    the application from starting with an unsigned configuration.
    """
    return Settings()
