"""
Configuration settings for Checkmate.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Checkmate"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === API Server ===
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # === Checks ===
    FILEPATH_ENV_VAR: str = "CHECKMATE_FILEPATH"  # Exported to local commands when create_file is set
    TCP_READ_BUFFER_SIZE: int = 1024  # bytes read per TCP echo attempt

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
