"""Storefront Configuration"""

from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Client settings loaded from environment"""

    # Bookstore API
    bookstore_api_url: str = "http://localhost:8000/api"
    request_timeout: float = 15.0

    # Local cart storage
    cart_storage_path: str = str(Path.home() / ".bookstore" / "storage.json")
    cart_storage_key: str = "bookstore-cart-v1.1"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
