"""Configuration management for fairgoals."""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OutputFormat(str, Enum):
    """Output formats supported by the command line interface."""

    TABLE = "table"
    JSON = "json"


DEFAULT_TOTAL_LINES = [0.5, 1.5, 2.5, 3.5, 4.5, 5.5, 6.5]
DEFAULT_HANDICAP_LINES = [step * 0.25 for step in range(-8, 9)]


class FairGoalsConfig(BaseSettings):
    """Configuration settings for fairgoals."""

    # Progress and logging
    log_level: str = Field(
        default="WARNING",
        description="Logging level used by the command line interface",
        alias="FAIRGOALS_LOG_LEVEL",
    )

    # Presentation
    output_format: OutputFormat = Field(
        default=OutputFormat.TABLE,
        description="Output format: 'table' or 'json'",
        alias="FAIRGOALS_OUTPUT",
    )

    precision: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Decimal places used when printing odds and percentages",
        alias="FAIRGOALS_PRECISION",
    )

    # Market board lines
    total_lines: list[float] = Field(
        default_factory=lambda: list(DEFAULT_TOTAL_LINES),
        description="Full-time total goal lines priced on the market board",
        alias="FAIRGOALS_TOTAL_LINES",
    )

    handicap_lines: list[float] = Field(
        default_factory=lambda: list(DEFAULT_HANDICAP_LINES),
        description="Asian handicap lines priced on the market board",
        alias="FAIRGOALS_HANDICAP_LINES",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global configuration instance
config = FairGoalsConfig()


def get_config() -> FairGoalsConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> None:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
        else:
            raise ValueError(f"Unknown configuration option: {key}")


def reset_config() -> None:
    """Reset configuration to defaults."""
    global config
    config = FairGoalsConfig()
