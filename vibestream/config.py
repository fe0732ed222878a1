# ============================================================================
# FILE: vibestream/config.py
# ============================================================================
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application configuration using Pydantic BaseSettings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App settings
    APP_NAME: str = "VibeStream Playlist API"
    DEBUG: bool = False
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./vibestream.db"  # Change to PostgreSQL in production
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    # Upper bound on lock waits (SQLite busy timeout, pool checkout timeout)
    DB_TIMEOUT_SECONDS: float = 15.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # "text" or "json"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Identity: header set by the upstream auth gateway
    OWNER_HEADER: str = "X-User-Id"


settings = Settings()
