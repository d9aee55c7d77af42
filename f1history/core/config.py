"""
Configuration management for the F1 history API.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # Logging configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")

    # External API configuration
    ergast_api_url: str = Field(
        default="https://ergast.com/api/f1",
        description="Ergast API base URL",
    )
    ergast_api_timeout: int = Field(
        default=30,
        description="Ergast API timeout in seconds",
    )
    ergast_response_suffix: str = Field(
        default=".json",
        description="Suffix appended to every logical resource path",
    )

    # Domain configuration
    earliest_season: int = Field(
        default=1950,
        description="First season covered by the provider",
    )

    # Cache configuration
    cache_max_size: Optional[int] = Field(
        default=None,
        ge=0,
        description="Maximum number of cached responses (None for unbounded)",
    )
    season_cache_size: int = Field(
        default=16,
        description="Number of converted seasons kept by the history service",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "F1HISTORY_",
        "case_sensitive": False,
    }


# Global settings instance
settings = Settings()
