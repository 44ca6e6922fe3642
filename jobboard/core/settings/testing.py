from typing import Optional

from .base import BaseSettings


class TestingSettings(BaseSettings):
    ENVIRONMENT: str = "testing"
    DEBUG: bool = True

    PROJECT_NAME: str = "Job Board API - Testing"

    DATABASE_URL: str = "sqlite+aiosqlite:///./test.db"

    # Short timeouts so a broken fake never stalls the suite
    REDIS_URL: Optional[str] = "redis://localhost:6379/15"
    REDIS_CONNECT_TIMEOUT: float = 1.0
    CACHE_OPERATION_TIMEOUT: float = 0.5

    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_KEY: Optional[str] = "test-anon-key"

    GROQ_API_KEY: Optional[str] = "test-groq-key"

    LOG_LEVEL: str = "WARNING"
    LOG_FILE: Optional[str] = None

    model_config = {
        "case_sensitive": True,
        "env_file": ".env.test",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
