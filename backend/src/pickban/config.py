"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    host: str = "127.0.0.1"
    port: int = 8000

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # League client (LCU) connection
    lcu_lockfile: str = ""
    lcu_timeout_seconds: float = 2.0
    lcu_max_retries: int = 3
    # Seconds between session polls and actuator ticks
    lcu_poll_interval_seconds: float = 0.5

    # Champions at or above the threshold skip the server pickable check.
    # Only meant for test realms where those ids are never reported as pickable.
    allow_high_id_champions: bool = False
    high_id_champion_threshold: int = 3000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
