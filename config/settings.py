# config/settings.py

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
import os
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Volunteer Hub"
    DEBUG: bool = False
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")

    # CORS
    CORS_ORIGINS: str = ""

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        if not self.CORS_ORIGINS:
            return ["*"] if self.DEBUG else []
        return [s.strip() for s in self.CORS_ORIGINS.split(",") if s.strip()]

    # Database
    DATABASE_URL: str = "sqlite:///./volunteer_hub.db"
    DB_POOL_SIZE: int = Field(default=20, ge=5, le=100)
    DB_MAX_OVERFLOW: int = Field(default=30, ge=5, le=100)
    DB_POOL_RECYCLE: int = Field(default=3600, ge=300)

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"

    # Security
    SECRET_KEY: str = Field(default="change-me-in-production", min_length=8)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60, ge=1, le=1440)
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    # Password policy
    MIN_PASSWORD_LENGTH: int = Field(default=8, ge=6, le=128)

    # Caching
    CACHE_ENABLED: bool = True
    CACHE_DEFAULT_TTL: int = Field(default=300, ge=1)

    # Events
    DEFAULT_EVENT_CAPACITY: int = Field(default=10, ge=1)

    # Monitoring
    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # Server
    PORT: Optional[int] = Field(default=8000, ge=1, le=65535)

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret(cls, v):
        """Ensure the signing secret is strong enough"""
        if len(v) < 32:
            import warnings
            warnings.warn(
                f"Secret key is only {len(v)} characters. Consider using at least 32 characters for production.",
                UserWarning,
            )
        return v

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v):
        """Validate database URL format"""
        # Render/Heroku hand out postgres:// but SQLAlchemy needs postgresql://
        if v.startswith("postgres://"):
            v = v.replace("postgres://", "postgresql://", 1)
        if not v.startswith(("postgresql://", "postgresql+psycopg2://", "sqlite://")):
            raise ValueError("Unsupported database URL format")
        return v

    @field_validator("REDIS_URL")
    @classmethod
    def validate_redis_url(cls, v):
        """Validate Redis URL format"""
        if not v.startswith(("redis://", "rediss://")):
            raise ValueError("Invalid Redis URL format")
        return v

    @field_validator("CORS_ORIGINS")
    @classmethod
    def validate_cors_origins(cls, v):
        """Validate CORS origins in production"""
        environment = os.getenv("ENVIRONMENT", "development")
        if environment == "production" and ("*" in v or not v):
            raise ValueError("Wildcard CORS origins not allowed in production")
        return v

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
