from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

from ..sdk.config import (
    ClientConfig,
    DEFAULT_BASE_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="CONVERTEVERYTHING_", extra="ignore"
    )

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    debug: bool = False
    log_level: str = "INFO"

    def to_client_config(self) -> ClientConfig:
        """Build the explicit client configuration; validates key and base URL."""
        return ClientConfig(
            api_key=self.api_key or "",
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            max_retries=self.max_retries,
        )

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


def get_settings() -> Settings:
    return Settings()
