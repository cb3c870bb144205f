"""
GrubDash — Core config
"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    SERVICE_NAME: str = "grubdash"
    SERVICE_VERSION: str = "1.0.0"
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    METRICS_ENABLED: bool = True
    OTEL_ENABLED: bool = False
    OTEL_EXPORTER_OTLP_ENDPOINT: str = "http://localhost:4317"

    # JSON file shaped {"dishes": [...], "orders": [...]}
    SEED_DATA_PATH: str | None = None


@lru_cache()
def get_settings() -> Settings:
    return Settings()
