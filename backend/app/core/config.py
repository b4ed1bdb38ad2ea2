from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or a .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    app_name: str = "Cupons API"
    app_version: str = "0.1.0"
    environment: str = "local"

    database_url: str = "sqlite+aiosqlite:///./cupons.db"
    database_echo: bool = False
    auto_create_tables: bool = True

    log_json: bool = False
    log_level: str = "INFO"

    cors_origins: list[str] = ["http://localhost:4200"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    sentry_dsn: str | None = None
    sentry_traces_sample_rate: float = 0.0
    sentry_enable_logs: bool = False
    sentry_log_level: str = "error"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
