"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Product store
    store_backend: str = "sql"  # "sql" or "rest"
    database_url: str = "postgresql+asyncpg://catalog:catalog_dev_password@db:5432/catalog"
    rest_store_url: str = "http://store:3000"
    rest_store_api_key: str = ""
    rest_store_table: str = "products"
    rest_store_timeout: float = 10.0

    # Browsing
    page_size: int = 36
    search_debounce_ms: int = 400

    # Preferences
    preference_file: str = ".catalog-preferences.json"

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "CATALOG_"


settings = Settings()
