from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RETRY_", extra="ignore")
    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 40.0


class CircuitSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CIRCUIT_", extra="ignore")
    failure_threshold: int = 3
    recovery_timeout: float = 30.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    quickstream_env: str = "development"
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"

    # Producer backend
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "OPEN_AI_KEY"),
    )
    openai_base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    temperature: float = 0.7
    request_timeout_seconds: float = 60.0

    # Offline fallback producer
    echo_delay_seconds: float = 0.05

    # Nested settings
    retry: RetrySettings = RetrySettings()
    circuit: CircuitSettings = CircuitSettings()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
