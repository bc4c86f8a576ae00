"""
Application configuration using pydantic-settings.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./vietnamese_history.db"
    auto_create_tables: bool = True

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api"
    project_name: str = "Vietnamese History Explorer"

    # CORS - only enforced in production, development allows every origin
    backend_cors_origins: list[str] = [
        "https://vietnamese-history.vercel.app",
        "https://www.vietnamese-history.vn",
    ]

    # Explorer client
    api_base_url: str = "http://localhost:3000/api"
    client_timeout: float = 10.0
    search_debounce_seconds: float = 0.3

    class Config:
        env_file = ".env"
        extra = "ignore"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins(self) -> list[str]:
        if self.is_production:
            return self.backend_cors_origins
        return ["*"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
