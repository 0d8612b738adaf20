"""Centralized configuration management using Pydantic Settings."""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Formats seen in the Nashville export ("April 9, 2013") and its SQL/Excel round trips
DEFAULT_DATE_FORMATS = [
    "%B %d, %Y",
    "%b %d, %Y",
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%m/%d/%Y",
]

DEFAULT_VACANT_CODES = {"Y": "Yes", "N": "No"}


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


def _check_delimiter(v: str) -> str:
    if not v:
        raise ValueError("address_delimiter must not be empty")
    return v


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Environment = Field(default=Environment.DEVELOPMENT, description="Environment")
    debug: bool = Field(default=True, description="Debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_to_file: bool = Field(default=True, description="Write rotated log files to ./logs")

    # Database
    database_url: str = Field(
        default="sqlite:///./data/housing.db", description="Database connection URL"
    )

    # Cleaning
    date_input_formats: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DATE_FORMATS),
        description="Accepted sale date formats, tried in order",
    )
    address_delimiter: str = Field(default=",", description="Composite address delimiter")
    vacant_code_map: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_VACANT_CODES),
        description="Raw SoldAsVacant code -> canonical label",
    )
    drop_columns_after_split: bool = Field(
        default=True, description="Drop superseded raw columns at the end of a run"
    )

    @field_validator("address_delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        """Reject an empty delimiter."""
        return _check_delimiter(v)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == Environment.PRODUCTION

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database."""
        return self.database_url.startswith("sqlite")

    @property
    def data_dir(self) -> Path:
        """Get data directory path."""
        path = Path("./data")
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def logs_dir(self) -> Path:
        """Get logs directory path."""
        path = Path("./logs")
        path.mkdir(parents=True, exist_ok=True)
        return path


class CleaningConfig(BaseModel):
    """Options recognized by the cleaning pipeline."""

    date_input_formats: list[str] = Field(default_factory=lambda: list(DEFAULT_DATE_FORMATS))
    address_delimiter: str = ","
    vacant_code_map: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_VACANT_CODES))
    drop_columns_after_split: bool = True

    @field_validator("address_delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        """Reject an empty delimiter."""
        return _check_delimiter(v)

    @field_validator("date_input_formats")
    @classmethod
    def validate_formats(cls, v: list[str]) -> list[str]:
        """Require at least one accepted date format."""
        if not v:
            raise ValueError("date_input_formats must list at least one format")
        return v

    @classmethod
    def from_settings(cls, source: Settings) -> "CleaningConfig":
        """Build cleaning options from application settings.

        Args:
            source: Loaded settings

        Returns:
            CleaningConfig instance
        """
        return cls(
            date_input_formats=source.date_input_formats,
            address_delimiter=source.address_delimiter,
            vacant_code_map=source.vacant_code_map,
            drop_columns_after_split=source.drop_columns_after_split,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
