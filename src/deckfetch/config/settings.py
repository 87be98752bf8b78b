"""
Configuration management for deckfetch.

Uses Pydantic for type-safe, validated configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from deckfetch import __version__


class DeckFetchSettings(BaseSettings):
    """Main configuration for deckfetch.

    Settings can be overridden via:
    1. Environment variables (prefixed with DF_)
    2. .env file in the working directory
    3. Programmatic overrides (CLI options)

    Example:
        export DF_MAX_DOWNLOAD_WORKERS=4
        export DF_LOG_LEVEL=DEBUG
    """

    # === Downloads ===
    max_download_workers: int = Field(
        default=1,
        ge=1,
        le=32,
        description="Number of cards downloaded concurrently (1 = one fetch at a time)",
    )
    fail_fast: bool = Field(
        default=True,
        description="Abort the whole run on the first failed asset",
    )
    output_root: Path = Field(
        default=Path("."),
        description="Directory under which the deck directory is created",
    )

    # === HTTP ===
    http_timeout: float = Field(
        default=30, ge=1, le=300, description="HTTP request timeout in seconds"
    )
    user_agent: str = Field(
        default=f"deckfetch/{__version__}", description="User-Agent header value"
    )

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_rotation: str = Field(default="10 MB", description="Log file rotation size")
    log_retention: str = Field(
        default="10 days", description="Log file retention period"
    )
    log_to_file: bool = Field(default=False, description="Enable file logging")
    logs_dir: Path = Field(default=Path("logs"), description="Log files directory")

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        """Accept lower-case level names from the environment."""
        if isinstance(v, str):
            return v.upper()
        return v

    model_config = {
        "env_prefix": "DF_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Global settings instance
settings = DeckFetchSettings()


def reload_settings() -> DeckFetchSettings:
    """Reload settings from environment and .env file.

    Useful for testing or runtime configuration changes.
    """
    global settings
    settings = DeckFetchSettings()
    return settings
