from typing import List, Optional

from pydantic import Field

from .base import BaseSettings


class ProductionSettings(BaseSettings):
    # ===============================
    # ENVIRONMENT SETTINGS
    # ===============================
    ENVIRONMENT: str = "production"
    DEBUG: bool = False

    # ===============================
    # DATABASE SETTINGS - SUPABASE POSTGRES
    # ===============================
    DATABASE_URL: str = Field(..., description="Async SQLAlchemy URL for Postgres")
    DATABASE_ECHO: bool = False  # Never echo SQL in production

    # ===============================
    # CORS SETTINGS
    # ===============================
    BACKEND_CORS_ORIGINS: List[str] = Field(
        default_factory=list, description="CORS origins for production frontends"
    )
    SITE_URL: str = Field(..., description="Public site URL for auth redirects")

    # ===============================
    # REDIS SETTINGS
    # ===============================
    REDIS_URL: Optional[str] = Field(
        default="redis://localhost:6379", description="Redis connection URL"
    )

    # ===============================
    # SUPABASE SETTINGS
    # ===============================
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_KEY: str = Field(..., description="Supabase anon/service role key")

    # ===============================
    # LLM SETTINGS
    # ===============================
    GROQ_API_KEY: Optional[str] = Field(default=None, description="Groq API key")

    # ===============================
    # LOGGING SETTINGS
    # ===============================
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FILE: Optional[str] = Field(default=None, description="Log file path")

    model_config = {
        "case_sensitive": True,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
