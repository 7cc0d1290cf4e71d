from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Database - SQLite by default, any SQLAlchemy URL works
    database_url: str = "sqlite:///./blogsync.db"

    # Application
    app_name: str = "blogsync"
    debug: bool = False
    log_level: str = "INFO"
    logs_dir: Path = Path("logs")
    media_dir: Path = Path("public/uploads")

    # HTTP client
    http_timeout_seconds: int = 30
    http_max_retries: int = 3

    # dev.to ingestion
    devto_api_base: str = "https://dev.to/api"
    devto_per_page: int = 20
    devto_max_pages: int = 5
    devto_sync_interval_minutes: int = 60

    # LinkedIn cross-posting
    linkedin_access_token: str | None = None
    linkedin_person_urn: str | None = None
    linkedin_client_id: str | None = None
    linkedin_client_secret: str | None = None
    linkedin_api_base: str = "https://api.linkedin.com/rest"
    linkedin_version: str = "202602"
    linkedin_max_length: int = 3000
    linkedin_post_format: str = "styled"

    # Public site
    blog_base_url: str | None = None
    site_url: str = "https://www.davidbogomolov.com"

    # Worker configuration
    worker_poll_seconds: float = 2.0
    worker_max_retries: int = 3

    @field_validator("linkedin_post_format")
    @classmethod
    def validate_post_format(cls, v: str) -> str:
        normalized = v.strip().lower()
        if normalized not in {"styled", "plain"}:
            raise ValueError("LINKEDIN_POST_FORMAT must be 'styled' or 'plain'")
        return normalized

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v:
            raise ValueError("DATABASE_URL must be set")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
