"""Application configuration loading via Pydantic settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    app_name: str = Field(default="metricslab", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    metrics_cardinality_limit: int | None = Field(default=None, alias="METRICS_CARDINALITY_LIMIT")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("metrics_cardinality_limit")
    @classmethod
    def check_cardinality_limit(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("METRICS_CARDINALITY_LIMIT must be a positive integer")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()
