from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Helpdesk configuration read from ``HELPDESK_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="HELPDESK_", env_file=".env", case_sensitive=False)

    app_name: str = Field(default="helpdesk")
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="%(levelname)s %(name)s %(message)s")

    # Largest accepted attachment, in bytes
    attachment_max_size: int = Field(default=10 * 1024 * 1024, gt=0)

    # Observability configuration
    otel_enabled: bool = Field(default=False)
    otel_service_name: str = Field(default="helpdesk")
    otel_exporter_otlp_endpoint: str | None = Field(default=None)
    otel_exporter_otlp_headers: str | None = Field(default=None)


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the helpdesk settings."""

    return Settings()
