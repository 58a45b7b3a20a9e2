from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Quick Transfer"
    environment: str = "development"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./quick_transfer.db"
    cors_origins: str = "*"

    shopify_api_key: str = ""
    shopify_api_secret: str = ""
    shopify_api_version: str = "2025-01"

    # Offline session seeded at startup for single-shop deployments.
    shop_domain: str = ""
    admin_access_token: str = ""

    adjustment_reason: str = "correction"
    remote_timeout_seconds: float = 15
    search_page_size: int = 10
    default_list_size: int = 50
    variants_page_size: int = 20
    levels_page_size: int = 10
    locations_page_size: int = 20

    # POS client
    app_url: str = "http://localhost:8000"
    origin_location_id: str = ""
    origin_name: str = "Origin"
    destination_location_id: str = ""
    destination_name: str = "Destination"
    result_auto_return_seconds: float = 3

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
