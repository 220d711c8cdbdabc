# homecook/config/settings.py
"""
Application configuration using pydantic-settings (pydantic v2 style).

This centralizes environment-driven configuration. Prefer reading values
from environment variables; do not rely on os.getenv inline defaults which
can silently hide missing configuration.
"""
from __future__ import annotations

import logging
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application configuration loaded from environment.

    Relevant environment variables:
      - SUPABASE_URL
      - SUPABASE_SERVICE_ROLE_KEY
      - STORE_BACKEND (memory | supabase)
      - DEFAULT_DISCOVERY_RADIUS_KM
      - AVAILABLE_MEALS_LIMIT
      - TOP_RATED_MIN_RATING
      - HEALTH_CHECK_TIMEOUT
      - LOG_LEVEL
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Supabase
    supabase_url: Optional[str] = Field(default=None)
    supabase_service_role_key: Optional[str] = Field(default=None)

    # Which document store backs the services
    store_backend: Literal["memory", "supabase"] = Field(default="memory")

    # Discovery / listing defaults
    default_discovery_radius_km: float = Field(default=10.0, ge=0)
    available_meals_limit: int = Field(default=20, gt=0)
    top_rated_min_rating: float = Field(default=4.0, ge=0, le=5)

    # Runtime
    health_check_timeout: float = Field(default=5.0, gt=0)
    log_level: str = Field(default="INFO")

    # --- validators / post-init checks ---
    @field_validator("supabase_url", "supabase_service_role_key")
    @classmethod
    def maybe_strip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)

    def model_post_init(self, __context) -> None:  # pydantic v2 hooks
        """
        Light-weight validation/notice that runs after model is constructed.
        Uses logging (not print) so messages show up in server logs.
        """
        if self.store_backend == "supabase" and not self.supabase_configured:
            logger.warning(
                "STORE_BACKEND=supabase but Supabase credentials are not configured. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY."
            )
        if self.store_backend == "memory":
            logger.info(
                "Using the in-memory document store. Data is lost on restart."
            )


# single exporter
settings = Settings()
