"""
Configuration management for the KCCR catalog backend
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "KCCR Catalog Backend"
    APP_VERSION: str = "2.0.0"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./kccr_catalog.db"

    # Security
    SECRET_KEY: str = "cambia_esto"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Default admin, seeded once at startup
    DEFAULT_ADMIN_NAME: str = "Admin"
    DEFAULT_ADMIN_EMAIL: str = "admin@kccr.com"
    DEFAULT_ADMIN_PASSWORD: str = "Admin123!"

    # Product import
    IMPORT_BATCH_SIZE: int = 200
    IMPORT_PREFERRED_SHEET: str = "Final_02-26"  # used by scripts/import_products.py
    MAX_UPLOAD_SIZE_MB: int = 20

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
