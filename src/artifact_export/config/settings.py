"""Artifact export configuration settings using pydantic-settings."""

from functools import cached_property
from pathlib import Path

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration settings for an artifact export run.

    Settings are loaded from environment variables with the ARTIFACT_EXPORT_
    prefix. For example, ARTIFACT_EXPORT_PACING_INTERVAL=1.5 sets
    pacing_interval to 1.5.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARTIFACT_EXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote API
    base_url: str = "https://claude.ai/api"
    org_id: str | None = None
    session_key: SecretStr | None = None
    request_timeout: float = 30.0  # seconds

    # Delay between conversation fetches
    pacing_interval: float = 0.5  # seconds

    # Where the finished archive is saved
    output_dir: Path = Path(".")

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("pacing_interval")
    @classmethod
    def validate_pacing_interval(cls, v: float) -> float:
        """Ensure pacing interval is not negative."""
        if v < 0:
            raise ValueError("pacing_interval must not be negative")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        """Ensure request timeout is positive."""
        if v <= 0:
            raise ValueError("request_timeout must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Ensure log format is a known renderer."""
        if v.lower() not in {"json", "console"}:
            raise ValueError("log_format must be 'json' or 'console'")
        return v.lower()

    @cached_property
    def output_path(self) -> Path:
        """Return expanded output directory path."""
        return self.output_dir.expanduser()

    @property
    def session_cookie(self) -> str | None:
        """Return the raw session key, if one is configured."""
        if self.session_key is None:
            return None
        return self.session_key.get_secret_value() or None
