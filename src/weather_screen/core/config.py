"""Application configuration using Pydantic Settings."""

from typing import Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults but can be overridden via environment variables.
    The OpenWeatherMap credential is never given a default and is held as a secret.

    Example:
        >>> settings = Settings()
        >>> settings.UPSTREAM_TIMEOUT >= 0.1
        True
        >>> settings.LOCATION_SOURCE
        'static'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Weather Provider Configuration
    OPENWEATHER_BASE_URL: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        description="Base URL for the OpenWeatherMap API (current and forecast endpoints)",
    )
    OPENWEATHER_API_KEY: SecretStr | None = Field(
        default=None,
        description="OpenWeatherMap API key (only passed if set, never logged)",
    )
    UPSTREAM_TIMEOUT: float = Field(
        default=5.0,
        description="Timeout for upstream requests in seconds (httpx default)",
        ge=0.1,
        le=30.0,
    )

    # Location Configuration
    LOCATION_SOURCE: Literal["static", "ip"] = Field(
        default="static",
        description="Where the device coordinate comes from (static config or IP lookup)",
    )
    LOCATION_LATITUDE: float | None = Field(
        default=None,
        description="Latitude used by the static location provider",
        ge=-90.0,
        le=90.0,
    )
    LOCATION_LONGITUDE: float | None = Field(
        default=None,
        description="Longitude used by the static location provider",
        ge=-180.0,
        le=180.0,
    )
    LOCATION_PERMISSION_GRANTED: bool = Field(
        default=True,
        description="Whether the user granted access to their location",
    )
    IP_GEOLOCATION_URL: str = Field(
        default="http://ip-api.com/json",
        description="IP geolocation endpoint used when LOCATION_SOURCE=ip",
    )

    # Session Configuration
    AUTO_FETCH: bool = Field(
        default=False,
        description="Fetch weather automatically once the location resolves",
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

    @field_validator("OPENWEATHER_BASE_URL", "IP_GEOLOCATION_URL")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate that a URL is properly formatted.

        Example:
            >>> Settings(OPENWEATHER_BASE_URL="https://api.example.com/").OPENWEATHER_BASE_URL
            'https://api.example.com'
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL settings must start with http:// or https://")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_static_coordinate(self) -> "Settings":
        """Require both halves of the static coordinate, or neither."""
        if (self.LOCATION_LATITUDE is None) != (self.LOCATION_LONGITUDE is None):
            raise ValueError(
                "LOCATION_LATITUDE and LOCATION_LONGITUDE must be set together"
            )
        return self


# Global settings instance
settings = Settings()
