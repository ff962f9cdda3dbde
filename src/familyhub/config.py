"""Application settings."""

from pathlib import Path

from pydantic_settings import BaseSettings

# Default data directory (repository root / data)
DEFAULT_DATA_DIR = Path(__file__).parent.parent.parent / "data"


class Settings(BaseSettings):
    # Storage
    DATA_DIR: Path = DEFAULT_DATA_DIR
    DATABASE_NAME: str = "familyhub.db"
    UPLOADS_DIR: Path = DEFAULT_DATA_DIR / "uploads"
    PUBLIC_STORAGE_URL: str = "/uploads"

    # Security
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Environment
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_FILE: str = "logs/familyhub.log"

    # Views
    PAGE_SIZE: int = 10
    PROFILE_LOAD_TIMEOUT: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
