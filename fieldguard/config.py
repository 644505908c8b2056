"""Engine configuration via environment variables."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # MX lookups
    MX_CHECK_ENABLED: bool = True
    MX_LOOKUP_TIMEOUT_SECONDS: float = 3.0
    MX_LOOKUP_RETRIES: int = 2
    DNS_NAMESERVERS: list[str] = []

    # Results
    FAILURE_THRESHOLD: str = "error"

    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "info"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
