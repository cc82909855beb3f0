"""
Application configuration using Pydantic Settings.

All environment variables are accessed through this config object.
Never use os.getenv() directly in business logic.
"""

from typing import Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application Configuration
    APP_NAME: str = Field(
        default="Leave Management API",
        description="Human readable service name",
    )
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000"],
        description="CORS allowed origins",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level",
    )

    # Rate Limiting Configuration
    RATE_LIMIT_ENABLED: bool = Field(
        default=True,
        description="Enforce per-endpoint rate limit policies",
    )
    RATE_LIMIT_CLEANUP_INTERVAL_SECONDS: int = Field(
        default=60,
        gt=0,
        description="Interval between sweeps of expired rate limit records",
    )

    # Storage Configuration
    STORAGE_PATH: str = Field(
        default="/tmp/leave-management",
        description="Path for document attachment storage",
    )
    MAX_UPLOAD_SIZE: int = Field(
        default=10485760,
        description="Maximum document upload size in bytes (10MB)",
    )

    # Auth Configuration
    AUTH_TOKENS: Dict[str, str] = Field(
        default_factory=dict,
        description="Static bearer token to user id mapping (JSON object)",
    )
    SEED_LEAVE_TYPES: bool = Field(
        default=True,
        description="Load the default leave type catalog on startup",
    )
    BOOTSTRAP_ADMINS: Dict[str, str] = Field(
        default_factory=dict,
        description="User id to email mapping of administrators created on startup (JSON object)",
    )


# Global settings instance
settings = Settings()
