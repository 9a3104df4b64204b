"""
Application configuration using Pydantic Settings.
Loads from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "MediQueue Live Queue Viewer"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Hospital backend
    API_BASE_URL: str = "http://localhost:4000"
    REQUEST_TIMEOUT_SECONDS: float = 15.0

    # Persistent client storage (token, sessionToken, sessionExpiry)
    TOKEN_STORE_PATH: str = "./.mediqueue/storage.json"

    # Poll intervals per view
    PATIENT_QUEUE_LIST_POLL_SECONDS: float = 60
    PATIENT_QUEUE_DETAIL_POLL_SECONDS: float = 60
    PATIENT_DASHBOARD_POLL_SECONDS: float = 60
    RECEPTION_QUEUE_DASHBOARD_POLL_SECONDS: float = 30
    RECEPTION_QUEUE_DETAIL_POLL_SECONDS: float = 20
    DOCTOR_DASHBOARD_POLL_SECONDS: float = 30

    # Session monitor
    SESSION_CHECK_INTERVAL_SECONDS: float = 60
    SESSION_EXPIRY_WARNING_MINUTES: int = 5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
