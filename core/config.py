"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Database (execution log storage)
    DATABASE_URL: str = "sqlite+aiosqlite:///./etl_logs.db"

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # HTTP extraction
    HTTP_TIMEOUT: float = 30.0
    USER_AGENT: str = "extractkit/0.1"
    API_TOKEN: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
