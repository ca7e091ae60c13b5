"""Configuration settings for the face gallery service and console."""
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    These settings are loaded from environment variables with the following precedence:
    1. Environment variables
    2. .env file
    3. Default values

    Attributes:
        DATABASE_URL: SQLAlchemy async URL of the person/face store
        PLACEHOLDER_NAME_PREFIX: Prefix for system-generated person names
        API_BASE_URL: Base URL the console client talks to
        REQUEST_TIMEOUT: Client request timeout in seconds
        CLUSTERING_ENGINE_URL: Base URL of the external clustering engine, unset disables re-clustering
    """
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",  # No prefix for environment variables
        env_nested_delimiter="__"  # Use double underscore for nested settings
    )

    # Core Settings
    PROJECT_NAME: str = "Face Gallery Service"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    # CORS Settings
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8501"

    @property
    def cors_origins(self) -> List[str]:
        """Get list of allowed origins."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Database Settings
    DATABASE_URL: str = "sqlite+aiosqlite:///./face_gallery.db"
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_POOL_TIMEOUT: int = 30

    # Gallery Settings
    PLACEHOLDER_NAME_PREFIX: str = "Unknown"
    MAX_PERSON_NAME_LENGTH: int = 255

    # Clustering engine Settings
    CLUSTERING_ENGINE_URL: Optional[str] = None
    CLUSTERING_TIMEOUT: float = 300.0  # Seconds

    # Console client Settings
    API_BASE_URL: str = "http://localhost:8000"
    REQUEST_TIMEOUT: float = 30.0  # Seconds

    # Optional settings with defaults
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

settings = Settings()
