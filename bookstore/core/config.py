"""Bookstore API Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Bookstore API"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # Catalog
    seed_catalog: bool = True

    # Orders
    price_tolerance: float = 0.01
    currency_symbol: str = "₹"

    # Mail Configuration
    mail_enabled: bool = False
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    mail_from: Optional[str] = None
    mail_starttls: bool = True
    mail_ssl_tls: bool = False
    owner_email: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def mail_configured(self) -> bool:
        """Check if outbound mail can be sent"""
        return self.mail_enabled and all([
            self.smtp_host,
            self.smtp_user,
            self.smtp_password,
            self.mail_from,
        ])


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
