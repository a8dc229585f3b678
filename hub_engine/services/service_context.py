from __future__ import annotations

from dataclasses import dataclass

import httpx
from loguru import logger

from hub_engine.config import Settings, settings
from hub_engine.llm_client import build_generation
from hub_engine.research_core.models.interfaces import (
    FetchProvider,
    GenerationProvider,
    SearchProvider,
)
from hub_engine.tools.fetch_provider import SUPPORTED_FETCH_PROVIDERS, build_fetch_provider
from hub_engine.tools.search_provider import SUPPORTED_SEARCH_PROVIDERS, build_search_provider

DEFAULT_HTTP_TIMEOUT_SECONDS = 15.0


@dataclass
class ServiceContext:
    """Process-wide collaborators, built once and passed to the pipeline."""

    config: Settings
    search: SearchProvider
    fetch: FetchProvider
    generation: GenerationProvider
    http_client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "ServiceContext":
        config = config or settings
        if config.search_provider.lower().strip() not in SUPPORTED_SEARCH_PROVIDERS:
            raise ValueError(f"Unsupported SEARCH_PROVIDER: {config.search_provider}")
        if config.fetch_provider.lower().strip() not in SUPPORTED_FETCH_PROVIDERS:
            raise ValueError(f"Unsupported FETCH_PROVIDER: {config.fetch_provider}")

        http_client = httpx.AsyncClient(timeout=DEFAULT_HTTP_TIMEOUT_SECONDS)
        search = build_search_provider(config, http_client)
        fetch = build_fetch_provider(config, http_client)
        generation = build_generation(config)
        logger.info(
            f"Service context ready: search={search.name} fetch={fetch.name} "
            f"fetch_deadline_ms={config.fetch_deadline_ms}"
        )
        return cls(
            config=config,
            search=search,
            fetch=fetch,
            generation=generation,
            http_client=http_client,
        )

    async def aclose(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()
            self.http_client = None
        close = getattr(self.generation, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "ServiceContext":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
