import os
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application settings."""
    # Base settings
    DEBUG: bool = False

    # CORS settings
    CORS_ORIGINS: List[str] = [
        "http://localhost:8081",  # Expo dev server
        "http://localhost:8000",  # Backend server
    ]

    # Auth settings
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7"))
    PASSWORD_MIN_LENGTH: int = 8

    # Database settings
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "postgres")
    DB_NAME: str = os.getenv("DB_NAME", "fasttrack")
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    )

    # Redis settings (rate limit storage)
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

    # Statistics / calendar settings
    DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "UTC")

    # Social settings
    LEADERBOARD_LIMIT: int = 50
    FEED_PAGE_SIZE: int = 20
    CIRCLE_MAX_MEMBERS: int = 10
    CIRCLE_MESSAGE_PAGE_SIZE: int = 50
    CIRCLE_MESSAGE_MAX_LENGTH: int = 2000
    DEFAULT_REMINDER_HOUR: int = 20

    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()
