"""
Configuration management for gitch.

This module provides centralized configuration with:
- Environment variable overrides (``GITCH_`` prefix)
- Type validation and defaults
- Pipeline, report and logging settings
"""

from typing import Dict, Any
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings import BaseSettings as PydanticBaseSettings


VALID_OUTPUT_FORMATS = ["text", "table", "json"]


class PipelineSettings(BaseSettings):
    """Commit pipeline configuration settings."""

    channel_capacity: int = Field(
        default=1000, ge=1, description="Commit records buffered between traversal and aggregation"
    )

    model_config = SettingsConfigDict(env_prefix="GITCH_PIPELINE_")


class ReportSettings(BaseSettings):
    """Report ranking and rendering settings."""

    order: str = Field(default="count", description="Default author ordering (count/span)")
    output_format: str = Field(default="text", description="Default output format (text/table/json)")

    model_config = SettingsConfigDict(env_prefix="GITCH_REPORT_")

    @field_validator("order")
    @classmethod
    def validate_order(cls, v):
        # Anything other than "span" ranks by commit count.
        return "span" if v.strip().lower() == "span" else "count"

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v):
        if v.lower() not in VALID_OUTPUT_FORMATS:
            raise ValueError(f"Output format must be one of: {VALID_OUTPUT_FORMATS}")
        return v.lower()


class MonitoringSettings(BaseSettings):
    """Logging configuration settings."""

    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Logging format string",
    )

    model_config = SettingsConfigDict(env_prefix="GITCH_MONITORING_")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


class Settings(PydanticBaseSettings):
    """
    Main application settings.

    Nested groups can be overridden from the environment, e.g.
    ``GITCH_PIPELINE__CHANNEL_CAPACITY=500`` or ``GITCH_REPORT__ORDER=span``.
    """

    app_name: str = Field(default="gitch", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")

    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    report: ReportSettings = Field(default_factory=ReportSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    model_config = SettingsConfigDict(
        env_prefix="GITCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration object

    Example:
        >>> settings = get_settings()
        >>> print(settings.pipeline.channel_capacity)
    """
    return Settings()


# Global settings instance
settings = get_settings()


def export_config(config: Settings = None) -> Dict[str, Any]:
    """
    Export configuration for display.

    Returns:
        Dict[str, Any]: Effective configuration as plain data
    """
    config = config or settings
    return {
        "app_name": config.app_name,
        "version": config.version,
        "pipeline": {
            "channel_capacity": config.pipeline.channel_capacity,
        },
        "report": {
            "order": config.report.order,
            "output_format": config.report.output_format,
        },
        "monitoring": {
            "log_level": config.monitoring.log_level,
        },
    }
