"""Application configuration"""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_prefix="LIBRARY_SERVICE__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Environment
    environment: str = "development"
    port: int = 8000

    # Database
    db_url: str = "sqlite:///data/library.db"
    db_echo: bool = False
    seed_data: bool = True

    # JWT Settings
    jwt_secret_key: str = "change-me-library-service-secret-key"
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "library-service"
    jwt_audience: str = "library-clients"
    access_token_lifetime: int = 3600  # 1 hour
    refresh_token_lifetime: int = 604800  # 7 days

    # Borrowing rules
    default_due_days: int = 14
    max_due_days: int = 90
    max_books_per_request: int = 5
    max_requests_per_month: int = 3
    max_extension_days: int = 7

    # Logging
    log_level: str = "INFO"

    # Version
    version: str = "0.1.0"

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.environment.lower() == "development"


# Create settings instance
settings = Settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger("library-service")
