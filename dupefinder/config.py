"""Configuration management using Pydantic BaseSettings.

This module provides centralized configuration management with validation,
type safety, and sensible defaults for dupefinder. Every field is read from
the environment variable of the same name (case-insensitive) or from ``.env``.
"""
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

_SETTINGS = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    case_sensitive=False,
    extra="ignore",
)


class SearchingConfig(BaseSettings):
    """Duplicate detection thresholds."""
    duplicate_age_threshold: float = Field(2.0, ge=0.0, description="Max publish age difference in hours")
    duplicate_size_threshold_in_percent: float = Field(1.0, ge=0.0, description="Max size difference in percent of the average size")
    dedup_trace_comparisons: bool = Field(False, description="Log every pairwise comparison at DEBUG")

    model_config = _SETTINGS


class LoggingConfig(BaseSettings):
    """Logging configuration."""
    level: str = Field("INFO", description="Logging level")
    format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log format")

    model_config = SettingsConfigDict(env_prefix="LOG_", **_SETTINGS)

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        if v.upper() not in _VALID_LOG_LEVELS:
            raise ValueError(f'Invalid log level: {v}. Valid options: {_VALID_LOG_LEVELS}')
        return v.upper()


class MetricsConfig(BaseSettings):
    """DogStatsD metrics configuration."""
    metrics_enabled: bool = Field(False, description="Emit DogStatsD metrics")
    dd_agent_host: str = Field("localhost", description="DogStatsD host")
    dd_agent_port: int = Field(8125, ge=1, le=65535, description="DogStatsD port")
    metrics_prefix: str = Field("dupefinder", description="Metric namespace")

    model_config = _SETTINGS


class Config(BaseSettings):
    """Main configuration class combining all settings."""

    # Searching / duplicate detection
    duplicate_age_threshold: float = Field(2.0, ge=0.0, description="Max publish age difference in hours")
    duplicate_size_threshold_in_percent: float = Field(1.0, ge=0.0, description="Max size difference in percent of the average size")
    dedup_trace_comparisons: bool = Field(False, description="Log every pairwise comparison at DEBUG")

    # Logging
    log_level: str = Field("INFO", description="Logging level")
    log_format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log format")

    # Metrics
    metrics_enabled: bool = Field(False, description="Emit DogStatsD metrics")
    dd_agent_host: str = Field("localhost", description="DogStatsD host")
    dd_agent_port: int = Field(8125, ge=1, le=65535, description="DogStatsD port")
    metrics_prefix: str = Field("dupefinder", description="Metric namespace")

    model_config = _SETTINGS

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        if v.upper() not in _VALID_LOG_LEVELS:
            raise ValueError(f'Invalid log level: {v}. Valid options: {_VALID_LOG_LEVELS}')
        return v.upper()

    @property
    def searching(self) -> SearchingConfig:
        return SearchingConfig(
            duplicate_age_threshold=self.duplicate_age_threshold,
            duplicate_size_threshold_in_percent=self.duplicate_size_threshold_in_percent,
            dedup_trace_comparisons=self.dedup_trace_comparisons,
        )

    @property
    def logging(self) -> LoggingConfig:
        return LoggingConfig(level=self.log_level, format=self.log_format)

    @property
    def metrics(self) -> MetricsConfig:
        return MetricsConfig(
            metrics_enabled=self.metrics_enabled,
            dd_agent_host=self.dd_agent_host,
            dd_agent_port=self.dd_agent_port,
            metrics_prefix=self.metrics_prefix,
        )

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any issues."""
        issues = []

        if self.duplicate_size_threshold_in_percent == 0:
            issues.append("DUPLICATE_SIZE_THRESHOLD_IN_PERCENT=0 disables duplicate detection (size test is strict)")

        if self.duplicate_size_threshold_in_percent > 50:
            issues.append("DUPLICATE_SIZE_THRESHOLD_IN_PERCENT is very high, unrelated releases may be merged")

        if self.duplicate_age_threshold > 24 * 7:
            issues.append("DUPLICATE_AGE_THRESHOLD is more than a week, reposts may be merged with originals")

        if self.metrics_enabled and not self.dd_agent_host:
            issues.append("DD_AGENT_HOST is required when METRICS_ENABLED=true")

        return issues

    def log_configuration(self) -> None:
        """Log the current configuration (sanitized)."""
        from dupefinder.utils.logger import log_info

        log_info("Configuration loaded",
                 duplicate_age_threshold=self.duplicate_age_threshold,
                 duplicate_size_threshold_in_percent=self.duplicate_size_threshold_in_percent,
                 trace_comparisons=self.dedup_trace_comparisons,
                 metrics_enabled=self.metrics_enabled,
                 log_level=self.log_level)


# Global configuration instance (lazy loading)
_config = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables."""
    global _config
    _config = Config()
    return _config
