# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Approval Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    database_url: str = "postgresql+asyncpg://approval_engine:approval_engine@db:5432/approval_engine"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]

    # Auto-reject sweep
    auto_reject_working_days: int = 7
    auto_reject_interval_seconds: int = 86400

    # Registration bootstrap: who manages a newly registered employee/manager
    # when the registration payload does not name one.
    default_employee_manager_id: uuid.UUID | None = None
    default_manager_manager_id: uuid.UUID | None = None


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
