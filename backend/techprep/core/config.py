"""Application configuration."""

import json
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    APP_NAME: str = "Tech Interview Platform API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"
    GIT_COMMIT: str = "unknown"
    GIT_BRANCH: str = "unknown"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3002

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./techprep.db"
    DATABASE_ECHO: bool = False

    # Cache
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_REQUIRED: bool = False
    REDIS_CONNECT_TIMEOUT: float = 10.0
    CACHE_DEFAULT_TTL: int = 3600

    # Auth
    JWT_SECRET: str = "your-super-secret-jwt-key-for-development-only"
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "tech-interview-platform"
    JWT_AUDIENCE: str = "admin-panel"
    JWT_EXPIRE_HOURS: int = 24

    # CORS (comma separated or JSON list)
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:3001"

    # Rate limiting
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
    RATE_LIMIT_MAX_REQUESTS: int = 100

    # Mock interviews
    MOCK_INTERVIEW_SESSION_TIMEOUT_MINUTES: int = 120
    MOCK_INTERVIEW_CLEANUP_INTERVAL_SECONDS: int = 0

    @property
    def cors_origins(self) -> list[str]:
        raw = (self.CORS_ORIGINS or "").strip()
        if raw.startswith("["):
            try:
                values = json.loads(raw)
            except json.JSONDecodeError:
                values = []
            return [str(v).strip() for v in values if str(v).strip()]
        return [v.strip() for v in raw.split(",") if v.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
