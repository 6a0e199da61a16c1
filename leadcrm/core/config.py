"""
Lead CRM Application Configuration
Loads settings from .env file using Pydantic v2 with BaseSettings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ==================== Project Info ====================
    PROJECT_NAME: str = "Lead CRM API"
    PROJECT_DESCRIPTION: str = "Real-estate lead management with role-based dashboards"
    VERSION: str = "1.0.0"

    # ==================== Database ====================
    DATABASE_URL: str = "sqlite:///leadcrm_local.db"

    # ==================== Security & Authentication ====================
    SECRET_KEY: str = "change-this-secret-key-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080  # 7 days

    # ==================== CORS & Frontend ====================
    FRONTEND_URL: str = "http://localhost:3000"
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # ==================== Server Configuration ====================
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # ==================== Features ====================
    DEBUG: bool = False
    TESTING: bool = False
    LOG_LEVEL: str = "INFO"

    # ==================== Pagination ====================
    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 500

    # ==================== Import ====================
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024  # 5 MB

    # ==================== Export ====================
    EXPORT_FILENAME: str = "leads_export.csv"

    # ==================== Configuration Loading ====================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow",
        validate_default=True,
    )

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


# ==================== Settings Singleton ====================
@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()

