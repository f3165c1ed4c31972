"""
PeopleDesk - Configuration Settings

This module handles all application configuration using Pydantic Settings.
Environment variables are loaded from .env file.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ===========================================
    # APPLICATION CONFIGURATION
    # ===========================================
    app_name: str = "PeopleDesk HR Data"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    api_prefix: str = "/api"
    port: int = 8080

    # ===========================================
    # DATA MODE
    # USE_MOCK=true serves every resource from the in-memory
    # simulation; USE_MOCK=false forwards to the backend below.
    # Read once at startup, never toggled afterwards.
    # ===========================================
    use_mock: bool = True
    mock_delay_ms: int = 500  # Simulated latency for mock responses
    seed_fixtures: bool = True

    # ===========================================
    # REMOTE BACKEND
    # ===========================================
    backend_base_url: str = "http://localhost:8080/api"
    backend_timeout_seconds: float = 30.0

    # ===========================================
    # PAGINATION
    # ===========================================
    default_page_size: int = 10

    # ===========================================
    # CORS CONFIGURATION
    # ===========================================
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache so the mode flag is read exactly once per process.
    """
    return Settings()


# Export settings instance
settings = get_settings()
