"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./factoring.db"

    # External Services
    payments_api_base: str = "http://localhost:8003"

    # Service
    service_name: str = "factoring-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Fee sink used until an administrator sets one explicitly
    treasury_address: str | None = None


settings = Settings()
