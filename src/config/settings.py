# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for search, fetch, scoring, cache and logging knobs.
Defaults reproduce the documented pipeline constants (500 ms page delay,
2 s / 16 s rate-limit backoff, 800 ms inter-request delay, 100-entry cache).
"""

from __future__ import annotations

from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Search ===
    search_provider: Literal["google_cse", "crawl", "none"] = "google_cse"
    google_api_key: str = ""
    google_search_engine_id: str = ""
    google_search_base_url: str = "https://www.googleapis.com/customsearch/v1"
    search_site_restrict: str = "blog.naver.com"
    search_page_size: int = 10
    search_page_delay_s: float = 0.5
    search_max_results: int = 10
    search_timeout_s: float = 20.0
    keyword_timeout_s: float = 20.0

    # Crawl-based fallback provider
    crawl_fallback_enabled: bool = True
    crawl_search_base_url: str = "https://search.naver.com/search.naver"
    crawl_search_months: int = 6

    # === Fetch pipeline ===
    fetch_retries: int = 3
    fetch_base_delay_s: float = 2.0
    fetch_max_delay_s: float = 16.0
    fetch_linear_delay_s: float = 1.0
    fetch_inter_request_delay_s: float = 0.8
    fetch_min_content_chars: int = 100
    fetch_timeout_s: float = 20.0
    fetch_max_chars: int = 20_000
    fetch_concurrency: int = 1

    # === Scoring ===
    corpus_top_n: int = 5
    sentence_pair_threshold: float = 70.0
    max_compare_chars: int = 5_000

    # === Cache ===
    cache_enabled: bool = True
    cache_max_size: int = 100
    cache_default_ttl_s: float = 3600.0
    cache_sweep_interval_s: float = 300.0
    cache_search_ttl_s: float = 1800.0
    cache_fetch_ttl_s: float = 3600.0
    cache_score_ttl_s: float = 3600.0

    # === HTTP ===
    http_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    http_accept_language: str = "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7"
    http_timeout_s: float = 20.0

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"

    # --- Validators ---

    @field_validator("fetch_retries", "fetch_concurrency", "search_page_size")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:  # noqa: N805
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.fetch_max_delay_s < self.fetch_base_delay_s:
            errors.append("FETCH_MAX_DELAY_S must be >= FETCH_BASE_DELAY_S")

        if self.search_page_size > 10 and self.search_provider == "google_cse":
            errors.append("Google Custom Search returns at most 10 results per page")

        if self.fetch_min_content_chars >= self.fetch_max_chars:
            errors.append("FETCH_MIN_CONTENT_CHARS must be < FETCH_MAX_CHARS")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def google_credentials_present(self) -> bool:
        return bool(self.google_api_key and self.google_search_engine_id)


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
