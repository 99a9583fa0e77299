# tests/unit/config/test_settings.py — v2
"""Tests for config/settings.py: typed Settings and validation rules."""

from __future__ import annotations

import pytest

from originality.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_search(self):
        s = Settings(_env_file=None)
        assert s.search_provider == "google_cse"
        assert s.search_page_size == 10
        assert s.search_page_delay_s == 0.5
        assert s.search_site_restrict == "blog.naver.com"
        assert s.search_timeout_s == 20.0
        assert s.keyword_timeout_s == 20.0
        assert s.crawl_fallback_enabled is True

    def test_default_fetch(self):
        s = Settings(_env_file=None)
        assert s.fetch_retries == 3
        assert s.fetch_base_delay_s == 2.0
        assert s.fetch_max_delay_s == 16.0
        assert s.fetch_inter_request_delay_s == 0.8
        assert s.fetch_min_content_chars == 100
        assert s.fetch_concurrency == 1

    def test_default_cache(self):
        s = Settings(_env_file=None)
        assert s.cache_enabled is True
        assert s.cache_max_size == 100
        assert s.cache_sweep_interval_s == 300.0

    def test_credentials_flag(self):
        assert Settings(_env_file=None).google_credentials_present is False
        s = Settings(_env_file=None, google_api_key="k", google_search_engine_id="cx")
        assert s.google_credentials_present is True


class TestSettingsValidation:
    def test_max_delay_below_base(self):
        with pytest.raises(ConfigurationError, match="FETCH_MAX_DELAY_S"):
            Settings(_env_file=None, fetch_base_delay_s=10.0, fetch_max_delay_s=5.0)

    def test_google_page_size_limit(self):
        with pytest.raises(ConfigurationError, match="at most 10"):
            Settings(_env_file=None, search_page_size=20)

    def test_crawl_page_size_unrestricted(self):
        s = Settings(_env_file=None, search_provider="crawl", search_page_size=20)
        assert s.search_page_size == 20

    def test_min_content_vs_max_chars(self):
        with pytest.raises(ConfigurationError, match="FETCH_MIN_CONTENT_CHARS"):
            Settings(_env_file=None, fetch_min_content_chars=500, fetch_max_chars=400)

    def test_errors_joined(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(
                _env_file=None,
                fetch_base_delay_s=10.0,
                fetch_max_delay_s=5.0,
                fetch_min_content_chars=500,
                fetch_max_chars=400,
            )
        assert "; " in str(exc_info.value)

    @pytest.mark.parametrize("field", ["fetch_retries", "fetch_concurrency", "search_page_size"])
    def test_positive_fields(self, field):
        with pytest.raises(ValueError, match=field):
            Settings(_env_file=None, **{field: 0})


class TestLoadSettings:
    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("FETCH_RETRIES", "5")
        s = load_settings(_env_file=None, cache_max_size=10)
        assert s.fetch_retries == 5
        assert s.cache_max_size == 10
