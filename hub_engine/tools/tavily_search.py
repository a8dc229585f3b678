from __future__ import annotations

from typing import Any

from tavily import AsyncTavilyClient

from hub_engine.research_core.models.interfaces import SearchResult


class TavilySearch:
    name = "tavily"

    def __init__(self, *, api_key: str, search_depth: str = "basic", client: Any | None = None):
        self.api_key = api_key
        self.search_depth = search_depth
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.api_key:
                raise RuntimeError("TAVILY_API_KEY is not configured")
            self._client = AsyncTavilyClient(api_key=self.api_key)
        return self._client

    async def search(self, query: str, *, max_results: int = 10) -> list[SearchResult]:
        """Execute a Tavily web search and return structured results."""
        response = await self._get_client().search(
            query=query,
            search_depth=self.search_depth,
            max_results=max_results,
        )
        return [
            SearchResult(
                url=r.get("url", ""),
                title=r.get("title", ""),
                snippet=r.get("content", ""),
            )
            for r in response.get("results", [])
        ]
