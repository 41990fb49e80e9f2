# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application settings loaded from the environment."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the API service."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Price Guide RBAC"
    app_version: str = "0.1.0"

    # Database
    database_url: str = "sqlite:///./priceguide.db"
    database_echo: bool = False

    # Effective permission cache TTL in seconds (0 disables expiry)
    permission_cache_ttl_seconds: int = 300

    log_level: str = "INFO"

    # CORS origins for frontend development
    cors_origins: list[str] = ["http://localhost:5173"]


settings = Settings()
