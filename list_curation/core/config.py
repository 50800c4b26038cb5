"""
List-Curation-Service - Application Configuration

Patterns Applied:
- Pydantic Settings with SettingsConfigDict
- Environment variable prefix LCS_ for List-Curation-Service
"""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from list_curation.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables with LCS_ prefix.
    Example: LCS_MAX_RECORDS=500, LCS_PERMISSION_LEVELS='[0, 10, 20]'
    """

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8084

    # Application metadata
    service_name: str = "list-curation-service"
    version: str = "0.1.0"
    environment: str = "development"

    # Logging configuration
    log_level: str = "INFO"
    log_json: bool = True

    # Tracing configuration
    tracing_enabled: bool = True
    tracing_console_export: bool = False

    # Curation limits
    max_records: int = Field(default=10_000, ge=1)
    default_max_count: int = Field(default=10, ge=0)
    permission_levels: list[int] = Field(default_factory=lambda: [0, 1, 2, 3])

    model_config = SettingsConfigDict(
        env_prefix="LCS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("permission_levels")
    @classmethod
    def _levels_unique(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("permission_levels must not be empty")
        if len(set(value)) != len(value):
            raise ValueError("permission_levels must not repeat a level")
        return value


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings instance with values from environment

    Raises:
        ConfigurationError: If an environment value fails validation
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"invalid settings: {e}") from e
