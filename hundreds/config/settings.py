import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def get_database_url() -> str:
    """Get database URL, using absolute path for SQLite to avoid path resolution issues."""
    db_url = os.getenv("HUNDREDS_DATABASE_URL", "")
    if db_url:
        logger.info(f"Using HUNDREDS_DATABASE_URL from environment: {db_url}")
        return db_url

    # Use absolute path for SQLite
    db_path = Path(__file__).parent.parent.parent / "hundreds.db"
    abs_path = db_path.resolve()
    db_url = f"sqlite:///{abs_path}"
    logger.info(f"Using default database path: {db_url}")
    return db_url


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        description="SQLAlchemy URL of the history database",
    )
    timezone: str = Field(
        default="",
        description="IANA timezone used to decide where a day ends (empty = host local time)",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str | None = Field(default=None, description="Optional rotating log file path")
    rollover_interval_seconds: int = Field(
        default=60,
        description="How often the background job checks for a day change",
    )
    first_weekday: str = Field(
        default="sunday",
        description="Weekday shown in the first calendar column",
    )
    export_version: str = Field(default="1.0", description="Version written into export files")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="HUNDREDS_",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("rollover_interval_seconds")
    @classmethod
    def validate_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("HUNDREDS_ROLLOVER_INTERVAL_SECONDS must be a positive number of seconds")
        return value

    @field_validator("first_weekday")
    @classmethod
    def validate_first_weekday(cls, value: str) -> str:
        lowered = value.strip().lower()
        if lowered not in WEEKDAY_NAMES:
            raise ValueError(f"HUNDREDS_FIRST_WEEKDAY must be one of: {', '.join(WEEKDAY_NAMES)}")
        return lowered

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Reject unknown IANA names early instead of on the first clock read."""
        if not value:
            return value
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @property
    def first_weekday_index(self) -> int:
        """First calendar column as a `date.weekday()` number (Monday = 0)."""
        return WEEKDAY_NAMES.index(self.first_weekday)


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings (FastAPI dependency hook)."""
    return settings
