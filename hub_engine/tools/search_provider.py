from __future__ import annotations

import httpx

from hub_engine.config import Settings
from hub_engine.research_core.models.interfaces import SearchProvider
from hub_engine.tools.brave_search import BraveSearch
from hub_engine.tools.google_search import GoogleSearch
from hub_engine.tools.tavily_search import TavilySearch

SUPPORTED_SEARCH_PROVIDERS = ("google", "brave", "tavily")


def build_search_provider(config: Settings, http_client: httpx.AsyncClient) -> SearchProvider:
    provider = config.search_provider.lower().strip()
    timeout = config.search_timeout_seconds

    if provider == "google":
        return GoogleSearch(
            http_client,
            api_key=config.google_api_key,
            cse_id=config.google_cse_id,
            timeout=timeout,
        )
    if provider == "brave":
        return BraveSearch(http_client, api_key=config.brave_api_key, timeout=timeout)
    if provider == "tavily":
        return TavilySearch(api_key=config.tavily_api_key)

    raise ValueError(f"Unsupported SEARCH_PROVIDER: {config.search_provider}")

