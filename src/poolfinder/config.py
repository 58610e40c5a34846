"""
Configuration settings for the poolfinder service
"""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # API Settings
    app_name: str = "Poolfinder"
    app_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Primary store (PostgreSQL); disabled when no URL is configured
    database_url: Optional[str] = None
    primary_enabled: bool = True
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_command_timeout: float = 10.0

    # Secondary store (local JSON file)
    fallback_enabled: bool = True
    local_store_path: Optional[str] = "data/facilities.json"

    # Version history
    history_limit: int = 100
    history_timeout_seconds: float = 2.0

    # Search
    proximity_radius_km: float = 15.0

    # Load built-in sample pools into an empty store on startup
    seed_sample_data: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = 'ignore'

    @property
    def primary_configured(self) -> bool:
        return self.primary_enabled and bool(self.database_url)


# Global settings instance
settings = Settings()
