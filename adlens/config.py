"""ADLENS — Central Configuration via Pydantic Settings."""

from typing import Optional

from pydantic_settings import BaseSettings

from adlens.models.request_models import RetryPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Meta API ──
    meta_access_token: str = ""
    meta_ad_account_id: Optional[str] = None  # Auto-discovered when unset
    meta_api_version: str = "v21.0"
    meta_base_url: str = "https://graph.facebook.com"

    # ── Resilience ──
    request_timeout_ms: int = 30_000
    max_retries: int = 2
    retry_base_delay_ms: int = 1_000

    # ── App ──
    log_level: str = "INFO"

    # ── Reporting ──
    default_time_range: str = "last_7d"
    report_entity_limit: int = 50

    @property
    def retry_policy(self) -> RetryPolicy:
        """Process-wide resilience policy."""
        return RetryPolicy(
            timeout_ms=self.request_timeout_ms,
            max_retries=self.max_retries,
            base_delay_ms=self.retry_base_delay_ms,
        )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
