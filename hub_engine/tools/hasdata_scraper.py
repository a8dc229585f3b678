from __future__ import annotations

import asyncio

import httpx

from hub_engine.research_core.models.interfaces import FetchedDocument
from hub_engine.tools.web_utils import html_to_text

HASDATA_BASE_URL = "https://api.hasdata.com/scrape/web"


class HasdataScraper:
    name = "hasdata"

    def __init__(self, http_client: httpx.AsyncClient, *, api_key: str, render_js: bool = False):
        self._http = http_client
        self.api_key = api_key
        self.render_js = render_js

    async def fetch(self, url: str) -> FetchedDocument:
        """Scrape a URL using the Hasdata API and return its text."""
        if not self.api_key:
            raise RuntimeError("HASDATA_API_KEY is not configured")

        response = await self._http.get(
            HASDATA_BASE_URL,
            params={"url": url, "js_rendering": str(self.render_js).lower()},
            headers={
                "x-api-key": self.api_key,
                "Content-Type": "application/json",
            },
        )
        response.raise_for_status()
        data = response.json()

        text = data.get("text") or ""
        if not text and data.get("content"):
            text = await asyncio.to_thread(html_to_text, data["content"])
        return FetchedDocument(url=url, content=text)
