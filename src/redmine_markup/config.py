"""Configuration management for Redmine Markup."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from redmine_markup.formatting.markup import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT


class Settings(BaseSettings):
    """Application configuration via environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Nesting limit for frames, tables and cells
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        le=MAX_DEPTH_LIMIT,
        alias="REDMINE_MARKUP_MAX_DEPTH",
    )

    # Font families rendered as @code@ even without the fixed-pitch flag
    code_fonts: list[str] = Field(
        default_factory=lambda: ["Courier", "Courier New"],
        alias="REDMINE_MARKUP_CODE_FONTS",
    )

    # Appended to the input stem when writing output files
    output_suffix: str = Field(
        default="-redmine",
        alias="REDMINE_MARKUP_SUFFIX",
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if needed."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Load settings from an optional specific .env file."""
    global _settings
    if env_file:
        _settings = Settings(_env_file=env_file)
    else:
        _settings = Settings()
    return _settings
