from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./db/database.db"

    # Backend
    BACKEND_HOST: str = "127.0.0.1"
    BACKEND_PORT: int = 8000
    APP_DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)
    LOG_SQL: bool = False   # Enable SQLAlchemy query logging

    # Queue
    QUEUE_PAGE_SIZE: int = 200

    # Example sentences kept per lemma, and the accepted sentence length in word forms
    SENTENCE_LIMIT: int = 5
    SENTENCE_MIN_FORMS: int = 3
    SENTENCE_MAX_FORMS: int = 20  # exclusive

    # Scheduling
    TARGET_RETENTION: float = 0.9
    DAY_START_HOUR: int = 5  # UTC

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
