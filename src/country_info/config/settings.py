"""
Configuration settings for Country Info.

Settings are read from the environment using Pydantic settings. Provider
API keys use their conventional variable names; everything else is
prefixed with COUNTRY_INFO_.
"""

from typing import Any, Dict, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

OPENAI_API_KEY_ENV = "OPENAI_API_KEY"
ANTHROPIC_API_KEY_ENV = "ANTHROPIC_API_KEY"


class CountryInfoSettings(BaseSettings):
    """
    Main configuration settings for Country Info.

    Settings are loaded from multiple sources in order of preference:
    1. Explicit keyword arguments
    2. Environment variables (a .env file is merged into the environment first)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="COUNTRY_INFO_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # API Configuration
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(OPENAI_API_KEY_ENV, "openai_api_key"),
        description="OpenAI API key"
    )

    anthropic_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(ANTHROPIC_API_KEY_ENV, "anthropic_api_key"),
        description="Anthropic API key"
    )

    # Request Configuration
    max_tokens: int = Field(
        default=1000,
        description="Maximum tokens for the reply",
        gt=0,
        le=32768
    )

    timeout: float = Field(
        default=60.0,
        description="Request timeout in seconds",
        gt=0
    )

    # Logging Configuration
    log_level: str = Field(
        default="WARNING",
        description="Logging level"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level '{v}'. Valid levels: {', '.join(sorted(valid_levels))}")
        return v_upper

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary, excluding sensitive data."""
        data = self.model_dump()
        for key in ("openai_api_key", "anthropic_api_key"):
            if data.get(key):
                data[key] = "***masked***"
        return data


def get_settings() -> CountryInfoSettings:
    """Get the current Country Info settings."""
    return CountryInfoSettings()
