# src/search/provider_factory.py — v1
"""Factory: build search providers, the page fetcher and the orchestrator from settings.

Adapters receive the caller's `httpx.AsyncClient`; the caller owns its
lifetime (typically `async with build_async_client(settings) as client`).
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from originality.config.settings import ConfigurationError, Settings
from originality.search.base import BasePageFetcher, BaseSearchProvider
from originality.search.orchestrator import SearchOrchestrator

if TYPE_CHECKING:
    import httpx

    from originality.cache.base_cache import BaseCache

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "google_cse": "originality.search.adapters.google_cse.GoogleCustomSearchProvider",
    "crawl": "originality.search.adapters.crawl_search.CrawlSearchProvider",
}


class UnsupportedProviderError(ValueError):
    """Raised when a search provider is not registered."""


def create_search_provider(
    provider: str,
    client: httpx.AsyncClient,
    settings: Settings | None = None,
) -> BaseSearchProvider:
    """Instantiate a search adapter by name.

    Raises:
        UnsupportedProviderError: If provider is not registered.
        ConfigurationError: If google_cse is requested without credentials.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported search provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )
    settings = settings or Settings()
    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    if provider == "google_cse":
        if not settings.google_credentials_present:
            raise ConfigurationError(
                "GOOGLE_API_KEY and GOOGLE_SEARCH_ENGINE_ID are required "
                "for search_provider=google_cse"
            )
        instance = adapter_cls(
            client=client,
            api_key=settings.google_api_key,
            search_engine_id=settings.google_search_engine_id,
            site_restrict=settings.search_site_restrict or None,
            base_url=settings.google_search_base_url,
        )
    elif provider == "crawl":
        instance = adapter_cls(
            client=client,
            base_url=settings.crawl_search_base_url,
            months=settings.crawl_search_months,
        )
    else:
        instance = adapter_cls(client=client)

    logger.debug("Created search provider: %s", provider)
    return instance


def create_page_fetcher(
    client: httpx.AsyncClient, settings: Settings | None = None
) -> BasePageFetcher:
    """HTTP page fetcher truncating text to `fetch_max_chars`."""
    from originality.search.adapters.page_fetcher import HttpPageFetcher

    settings = settings or Settings()
    return HttpPageFetcher(client, max_chars=settings.fetch_max_chars)


def create_search_orchestrator(
    client: httpx.AsyncClient,
    settings: Settings | None = None,
    cache: BaseCache | None = None,
) -> SearchOrchestrator:
    """Wire primary and fallback providers into a SearchOrchestrator.

    Raises:
        ConfigurationError: If no provider is enabled or credentials are missing.
    """
    settings = settings or Settings()

    primary = None
    if settings.search_provider != "none":
        primary = create_search_provider(settings.search_provider, client, settings)

    fallback = None
    if settings.crawl_fallback_enabled and settings.search_provider != "crawl":
        fallback = create_search_provider("crawl", client, settings)

    if primary is None and fallback is None:
        raise ConfigurationError(
            "No search provider enabled: set SEARCH_PROVIDER or CRAWL_FALLBACK_ENABLED"
        )

    return SearchOrchestrator(
        primary=primary,
        fallback=fallback,
        cache=cache,
        cache_ttl_s=settings.cache_search_ttl_s,
        page_size=settings.search_page_size,
        page_delay_s=settings.search_page_delay_s,
        timeout_s=settings.search_timeout_s,
    )


def register_provider(name: str, class_path: str) -> None:
    """Register a custom search adapter implementing BaseSearchProvider."""
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered search provider: %s → %s", name, class_path)


def _import_class(class_path: str) -> type:
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
