"""Process settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "logpeek"
    app_version: str = "0.1.0"
    api_prefix: str = "/api"
    service_name: str = "logpeek"
    config_path: str = "logpeek.yml"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    # Basic-auth password; auth is disabled when unset
    secret: str | None = None
    buffer_update_cooldown: int = 10

    model_config = SettingsConfigDict(
        env_prefix="LOGPEEK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()

__all__ = ["settings", "Settings"]
