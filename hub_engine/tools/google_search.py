from __future__ import annotations

from typing import Any

import httpx

from hub_engine.research_core.models.interfaces import SearchResult

GOOGLE_CSE_URL = "https://www.googleapis.com/customsearch/v1"
GOOGLE_MAX_PAGE_SIZE = 10


class GoogleSearch:
    """Google Programmable Search (Custom Search JSON API)."""

    name = "google"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        api_key: str,
        cse_id: str,
        timeout: float = 10.0,
    ):
        self._http = http_client
        self.api_key = api_key
        self.cse_id = cse_id
        self.timeout = timeout

    async def search(
        self,
        query: str,
        *,
        max_results: int = 10,
        start: int = 1,
    ) -> list[SearchResult]:
        if not self.api_key or not self.cse_id:
            raise RuntimeError("GOOGLE_API_KEY and GOOGLE_CSE_ID must be configured")

        params: dict[str, Any] = {
            "key": self.api_key,
            "cx": self.cse_id,
            "q": query,
            "num": max(1, min(int(max_results), GOOGLE_MAX_PAGE_SIZE)),
            "start": max(int(start), 1),
        }
        response = await self._http.get(GOOGLE_CSE_URL, params=params, timeout=self.timeout)
        response.raise_for_status()
        payload = response.json()

        # "items" is absent when the query has no hits.
        return [
            SearchResult(
                url=item.get("link", ""),
                title=item.get("title", ""),
                snippet=item.get("snippet", ""),
            )
            for item in payload.get("items", []) or []
            if item.get("link")
        ]
