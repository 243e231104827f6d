"""Application configuration management using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Required settings will raise validation errors if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="academy-tracker", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins",
    )

    # Supabase
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_secret_key: str = Field(..., description="Supabase secret key for backend operations")

    # Reporting
    enrollment_goal: int = Field(default=200, description="Confirmed executives targeted for the goal year")
    goal_year: str = Field(default="2026", description="Cohort year prefix counted towards the goal")
    leaderboard_limit: int = Field(default=10, description="Rows shown per leaderboard")

    # Dashboard sessions
    session_cookie_name: str = Field(default="tracker_session", description="Session cookie name")
    session_cookie_max_age: int = Field(default=86400, description="Session cookie max age in seconds (1 day)")
    session_cookie_secure: bool = Field(default=True, description="Use secure cookies (HTTPS only)")
    session_idle_ttl_seconds: int = Field(default=3600, description="Idle time before a dashboard session is dropped")
    session_cleanup_interval_seconds: int = Field(default=300, description="Interval between idle session sweeps")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Note:
        Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
