"""Application configuration utilities."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Root logger level")
    json_logs: bool = Field(default=True, description="Enable JSON formatted logs")


class Settings(BaseSettings):
    """Central application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=(Path(__file__).resolve().parent.parent / ".env"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="qrisgate")
    environment: Literal["development", "staging", "production"] = Field(default="development")
    default_currency_code: str = Field(default="360", pattern=r"^\d{3}$", description="ISO 4217 numeric code for Tag 53")
    default_country_code: str = Field(default="ID", pattern=r"^[A-Z]{2}$", description="ISO 3166 alpha-2 code for Tag 58")
    unique_code_max: int = Field(default=999, ge=1, le=9999)
    instruction_ttl_hours: int = Field(default=24, ge=1, le=168)
    render_title: str = Field(default="qrisgate")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return memoized application settings."""

    return Settings()


settings = get_settings()
