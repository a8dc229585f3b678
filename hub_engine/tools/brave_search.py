from __future__ import annotations

from typing import Any

import httpx

from hub_engine.research_core.models.interfaces import SearchResult

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"


class BraveSearch:
    name = "brave"

    def __init__(self, http_client: httpx.AsyncClient, *, api_key: str, timeout: float = 10.0):
        self._http = http_client
        self.api_key = api_key
        self.timeout = timeout

    async def search(self, query: str, *, max_results: int = 10) -> list[SearchResult]:
        """Execute a Brave web search and normalize results."""
        if not self.api_key:
            raise RuntimeError("BRAVE_API_KEY is not configured")

        params: dict[str, Any] = {"q": query, "count": max_results}
        response = await self._http.get(
            BRAVE_SEARCH_URL,
            params=params,
            headers={
                "Accept": "application/json",
                "X-Subscription-Token": self.api_key,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = response.json()

        mapped: list[SearchResult] = []
        for item in payload.get("web", {}).get("results", []):
            snippets = item.get("extra_snippets", []) or []
            description = (item.get("description", "") or "").strip()
            mapped.append(
                SearchResult(
                    url=item.get("url", ""),
                    title=item.get("title", ""),
                    snippet=description or " ".join(snippets).strip(),
                )
            )
        return mapped
