"""Centralized configuration via pydantic-settings, loaded from .env."""

from __future__ import annotations

import functools

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Market data providers ──────────────────────────────────────────
    polygon_api_key: str = ""
    alpha_vantage_api_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "alpha_vantage_api_key",
            "next_public_alpha_vantage_api_key",
        ),
    )
    finnhub_api_key: str = ""
    provider_timeout_seconds: float = 15.0

    # Polygon monthly aggregates window and the coverage needed to accept it.
    polygon_start_date: str = "2020-01-01"
    polygon_end_date: str = "2025-12-31"
    polygon_min_bars: int = 60
    finnhub_lookback_years: int = 10

    # ── Analytics ──────────────────────────────────────────────────────
    strict_period_keys: bool = False

    # ── API Server ─────────────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    log_level: str = "INFO"

    # ── Computed helpers ───────────────────────────────────────────────
    @property
    def configured_providers(self) -> dict[str, bool]:
        """Which provider credentials are present (values never exposed)."""
        return {
            "Polygon.io": bool(self.polygon_api_key.strip()),
            "Alpha Vantage": bool(self.alpha_vantage_api_key.strip()),
            "Finnhub": bool(self.finnhub_api_key.strip()),
        }


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton accessor for the global settings."""
    return Settings()
