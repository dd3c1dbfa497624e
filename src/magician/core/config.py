"""
Configuration management.

Loads settings from environment variables and .env file.
Prefix: MAGICIAN_
"""

from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MAGICIAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # AI providers. Unprefixed vendor variables are consulted as well,
    # see magician.llm.credentials.
    anthropic_api_key: str = Field(default="", description="Anthropic API key")
    openai_api_key: str = Field(default="", description="OpenAI API key")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI-compatible endpoint",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Deployment environment"
    )

    # Routing
    default_timeout: float = Field(
        default=30.0, gt=0, description="Per-invocation deadline in seconds"
    )
    capabilities_file: Path | None = Field(
        default=None, description="Override for the packaged capabilities.yaml"
    )

    # Storage / logging
    data_dir: Path = Field(default=Path("data"), description="Data directory (logs)")
    log_level: str = Field(default="WARNING", description="Console log level without --debug")

    @property
    def log_path(self) -> Path:
        return self.data_dir / "magician.log"


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
