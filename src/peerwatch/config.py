"""Configuration management with pydantic-settings."""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_INTERVAL = 20.0
DEFAULT_TOLERANCE = 0.1  # padding for in-flight delay


class PeerwatchSettings(BaseSettings):
    """peerwatch settings loaded from environment variables.

    All settings use the PEERWATCH_ prefix for environment variables.
    """

    # Protocol timing
    interval: float = Field(
        default=DEFAULT_INTERVAL,
        description="Seconds between keepalive wake-ups",
    )
    tolerance: float = Field(
        default=DEFAULT_TOLERANCE,
        description="Seconds added to the interval before declaring a peer timeout",
    )

    # Logging configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(
        default="console",
        description="Log output format: console or json",
    )

    model_config = SettingsConfigDict(
        env_prefix="PEERWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("interval")
    @classmethod
    def _interval_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("interval must be positive")
        return value

    @field_validator("tolerance")
    @classmethod
    def _tolerance_non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("tolerance must not be negative")
        return value

    @field_validator("log_format")
    @classmethod
    def _known_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("console", "json"):
            raise ValueError(f"Unsupported log format: {value}. Supported: console, json")
        return value

    @property
    def threshold(self) -> float:
        """Elapsed time after which a silent peer is considered dead."""
        return self.interval + self.tolerance

    def to_display_dict(self) -> dict[str, Any]:
        """Settings as plain values, in display order."""
        return {
            "interval": self.interval,
            "tolerance": self.tolerance,
            "threshold": self.threshold,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


# Global settings instance
_settings: PeerwatchSettings | None = None


def get_settings() -> PeerwatchSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = PeerwatchSettings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None
