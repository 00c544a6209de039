"""
Runtime settings for exotab.

Values are read from the environment (prefix ``EXOTAB_``) or an optional
``.env`` file. Pipeline constants live here too so that tests and embedding
applications can see them in one place.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with automatic environment variable loading."""

    model_config = SettingsConfigDict(
        env_prefix="EXOTAB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === LOGGING ===
    LOG_FILE: Optional[str] = None
    LOG_LEVEL: str = "INFO"
    CONSOLE_LOG_LEVEL: str = "WARNING"
    LOG_ROTATION_TYPE: str = "size"
    LOG_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 5

    # === PROFILING ===
    # Non-numeric columns with at most this many distinct values are categorical.
    CATEGORICAL_MAX_UNIQUE: int = Field(default=20, ge=0)

    # === CLEANING ===
    DEFAULT_RARE_THRESHOLD: float = Field(default=5.0, ge=0, le=100)
    IQR_MULTIPLIER: float = Field(default=1.5, gt=0)
    RARE_CATEGORY_LABEL: str = "Others"

    # === TRAINING ===
    MISSING_SENTINEL: float = -999.0
    CLASSIFICATION_MAX_CLASSES: int = Field(default=20, ge=2)
    DEFAULT_RANDOM_STATE: int = 42

    # === LOADING ===
    FALLBACK_TO_SAMPLE: bool = True
    HTTP_TIMEOUT: float = Field(default=30.0, gt=0)

    @field_validator("LOG_LEVEL", "CONSOLE_LOG_LEVEL")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    return Settings()
