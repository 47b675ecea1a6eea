import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Get database URL, using absolute path for SQLite to avoid path resolution issues.

    SQLite is only meant for local development and tests. Set DATABASE_URL to
    a PostgreSQL connection string for anything shared.
    """
    db_url = os.getenv("DATABASE_URL", "")
    if db_url:
        logger.info(f"Using DATABASE_URL from environment: {db_url}")
        return db_url

    db_path = Path(__file__).parent.parent.parent / "lifting.db"
    abs_path = db_path.resolve()
    db_url = f"sqlite:///{abs_path}"
    logger.warning(f"Using SQLite database (LOCAL DEV ONLY): {db_url}")
    return db_url


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="DATABASE_URL",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    log_rotation: str = Field(default="10 MB", validation_alias="LOG_ROTATION")
    log_retention: str = Field(default="7 days", validation_alias="LOG_RETENTION")

    failure_threshold: int = Field(
        default=2,
        validation_alias="PROGRESSION_FAILURE_THRESHOLD",
        description="Consecutive missed weeks that trigger a weight regression",
    )
    deload_volume_factor: float = Field(
        default=0.5,
        validation_alias="PROGRESSION_DELOAD_VOLUME_FACTOR",
        description="Fraction of base sets prescribed on a deload week (rounded up, min 1)",
    )
    deload_interval_weeks: int = Field(
        default=0,
        validation_alias="PROGRESSION_DELOAD_INTERVAL_WEEKS",
        description="Deload every Nth week in addition to the final week (0 = final week only)",
    )
    default_training_weeks: int = Field(
        default=6,
        validation_alias="MESOCYCLE_TRAINING_WEEKS",
        description="Training weeks used when a plan carries no duration",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("failure_threshold")
    @classmethod
    def validate_failure_threshold(cls, value: int) -> int:
        if value < 1:
            raise ValueError(f"PROGRESSION_FAILURE_THRESHOLD must be >= 1, got {value}")
        return value

    @field_validator("deload_volume_factor")
    @classmethod
    def validate_deload_volume_factor(cls, value: float) -> float:
        if not 0 < value <= 1:
            raise ValueError(f"PROGRESSION_DELOAD_VOLUME_FACTOR must be in (0, 1], got {value}")
        return value

    @field_validator("deload_interval_weeks", "default_training_weeks")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"Week counts must be non-negative, got {value}")
        return value

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
