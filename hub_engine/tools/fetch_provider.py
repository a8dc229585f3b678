from __future__ import annotations

import httpx

from hub_engine.config import Settings
from hub_engine.research_core.models.interfaces import FetchProvider
from hub_engine.tools.direct_fetch import DirectFetch
from hub_engine.tools.hasdata_scraper import HasdataScraper
from hub_engine.tools.jina_reader import JinaReader

SUPPORTED_FETCH_PROVIDERS = ("direct", "jina", "jina_reader", "hasdata")


def build_fetch_provider(config: Settings, http_client: httpx.AsyncClient) -> FetchProvider:
    provider = config.fetch_provider.lower().strip()

    if provider == "direct":
        return DirectFetch(
            http_client,
            user_agent=config.fetch_user_agent,
            max_body_chars=config.fetch_max_body_chars,
        )
    if provider in ("jina", "jina_reader"):
        return JinaReader(
            http_client,
            api_key=config.jina_api_key,
            base_url=config.jina_reader_base_url,
        )
    if provider == "hasdata":
        return HasdataScraper(http_client, api_key=config.hasdata_api_key)

    raise ValueError(f"Unsupported FETCH_PROVIDER: {config.fetch_provider}")
