"""Application configuration via environment variables."""

from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

PLACEHOLDER_MARKER = "__PUT_YOUR_"


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""


class Settings(BaseSettings):
    processor: Literal["stripe", "mock"] = "stripe"

    stripe_secret_key: str = ""
    stripe_publishable_key: str = ""
    stripe_api_version: Optional[str] = None  # None = account default

    root_url: str = "http://localhost:8000"  # Public URL for onboarding callbacks
    account_dashboard_type: str = "express"
    request_transfers_capability: bool = True

    log_level: str = "INFO"
    mock_failure_rate: float = 0.05  # 5% simulated failure rate
    mock_latency_ms: int = 100  # Simulated processor latency

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("root_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def require_secret_key(config: Settings) -> str:
    """Return the Stripe secret key, failing fast if it is absent or a placeholder."""
    key = (config.stripe_secret_key or "").strip()
    if not key or PLACEHOLDER_MARKER in key:
        raise ConfigurationError(
            "Missing Stripe secret key (stripe_secret_key). "
            "Hint: set STRIPE_SECRET_KEY in the environment or .env"
        )
    return key


settings = Settings()
