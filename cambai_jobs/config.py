"""Configuration helpers for the CambAI job client."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


@dataclass
class Settings:
    """Centralized environment-driven configuration.

    Per-job-type polling defaults and bounds live on the job type descriptors;
    this only covers the knobs shared by every job.
    """

    cambai_api_key: Optional[str] = os.getenv("CAMBAI_API_KEY")
    cambai_base_url: str = os.getenv("CAMBAI_BASE_URL", "https://client.camb.ai/apis")
    # Per-request timeout handed to httpx, not the polling budget.
    http_timeout: float = float(os.getenv("CAMBAI_HTTP_TIMEOUT", "60"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance to avoid repeated environment reads."""

    return Settings()


settings = get_settings()
