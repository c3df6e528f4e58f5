"""Application configuration using Pydantic Settings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults but can be overridden via environment variables.
    Configuration is validated at startup and the application will fail fast if invalid.

    Example:
        >>> settings = Settings()
        >>> settings.CACHE_DURATION_MINUTES >= 1
        True
        >>> settings.cache_ttl_seconds == settings.CACHE_DURATION_MINUTES * 60
        True
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Weather provider configuration
    WEATHER_PROVIDER: Literal["openweather", "demo"] = Field(
        default="openweather",
        description="Weather data source (openweather or demo)",
    )
    OPENWEATHER_BASE_URL: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        description="Base URL for the OpenWeatherMap API",
    )
    OPENWEATHER_API_KEY: str | None = Field(
        default=None,
        description="OpenWeatherMap API key (sent as appid when set)",
    )

    # Geocoding configuration
    GEOCODING_BASE_URL: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL for the Nominatim geocoding API",
    )
    GEOCODING_USER_AGENT: str = Field(
        default="weather-lookup-api/0.1.0",
        description="User-Agent header sent to the geocoding provider",
    )

    UPSTREAM_TIMEOUT: float = Field(
        default=10.0,
        description="Timeout for upstream API requests in seconds",
        ge=0.1,
        le=30.0,
    )

    # Cache Configuration
    CACHE_DURATION_MINUTES: int = Field(
        default=30,
        description="TTL for current weather and forecast entries in minutes",
        ge=1,
        le=1440,
    )
    GEOCODING_CACHE_TTL: int = Field(
        default=24 * 60 * 60,
        description="TTL for geocoding entries in seconds",
        ge=1,
        le=7 * 24 * 60 * 60,
    )
    CACHE_MAX_SIZE: int = Field(
        default=10000,
        description="Maximum number of cached entries (LRU eviction)",
        ge=1,
        le=1000000,
    )

    # Server Configuration
    PORT: int = Field(
        default=8000,
        description="Server port",
        ge=1,
        le=65535,
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Environment Configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment (development, staging, production)",
    )

    @property
    def cache_ttl_seconds(self) -> int:
        """Weather cache TTL converted to seconds."""
        return self.CACHE_DURATION_MINUTES * 60

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that LOG_LEVEL is a valid logging level.

        Args:
            v: The log level string to validate

        Returns:
            The uppercase log level string

        Raises:
            ValueError: If the log level is invalid

        Example:
            >>> Settings(LOG_LEVEL="info").LOG_LEVEL
            'INFO'
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got {v}")
        return v_upper

    @field_validator("OPENWEATHER_BASE_URL", "GEOCODING_BASE_URL")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate that a base URL is properly formatted.

        Args:
            v: The URL string to validate

        Returns:
            The URL string without trailing slash

        Raises:
            ValueError: If the URL is invalid

        Example:
            >>> Settings(OPENWEATHER_BASE_URL="https://api.example.com/").OPENWEATHER_BASE_URL
            'https://api.example.com'
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://")
        # Remove trailing slash, endpoints are appended with "/"
        return v.rstrip("/")


# Global settings instance
settings = Settings()
