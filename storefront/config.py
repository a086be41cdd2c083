"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - environment="production" switches catalog access from the packaged fixture to HTTP
    - Timeouts and delays are milliseconds

Design Decisions:
    - Defaults provided for every setting: works out-of-the-box against the fixture
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FIXTURE_PATH = Path(__file__).parent / "static" / "products.json"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    environment: Literal["development", "production"] = "development"

    # Catalog
    catalog_base_url: str = "https://react-shopping-cart-67954.firebaseio.com"
    catalog_path: str = "/products.json"
    catalog_fixture_path: Path = DEFAULT_FIXTURE_PATH
    request_timeout_ms: int = 10_000
    health_timeout_ms: int = 5_000

    @field_validator("catalog_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    # Retry
    max_retries: int = 3
    base_delay_ms: int = 1000
    backoff_multiplier: float = 2
    max_delay_ms: int = 8000

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
