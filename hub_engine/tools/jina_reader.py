from __future__ import annotations

import httpx

from hub_engine.research_core.models.interfaces import FetchedDocument


class JinaReader:
    """Fetch pages through the Jina AI Reader API.

    API: GET https://r.jina.ai/<url>
    Headers:
        - Authorization: Bearer <api_key> (optional, raises rate limits)
        - X-Return-Format: text
    """

    name = "jina"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        api_key: str = "",
        base_url: str = "https://r.jina.ai",
    ):
        self._http = http_client
        self.api_key = api_key
        self.base_url = base_url.strip() or "https://r.jina.ai"

    def reader_url(self, url: str) -> str:
        if "{url}" in self.base_url:
            return self.base_url.format(url=url)
        return self.base_url.rstrip("/") + "/" + url

    async def fetch(self, url: str) -> FetchedDocument:
        headers = {"X-Return-Format": "text"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        response = await self._http.get(self.reader_url(url), headers=headers)
        response.raise_for_status()
        text = response.text.strip()
        if not text:
            raise RuntimeError("Jina reader returned empty body")
        return FetchedDocument(url=url, content=text)
