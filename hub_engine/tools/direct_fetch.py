from __future__ import annotations

import asyncio

import httpx

from hub_engine.research_core.models.interfaces import FetchedDocument
from hub_engine.tools.web_utils import html_to_text

MAX_BODY_CHARS = 500_000


class DirectFetch:
    """Fetch a page straight from its origin and keep the readable text."""

    name = "direct"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        user_agent: str,
        max_body_chars: int = MAX_BODY_CHARS,
    ):
        self._http = http_client
        self.user_agent = user_agent
        self.max_body_chars = max(int(max_body_chars), 1)

    async def fetch(self, url: str) -> FetchedDocument:
        response = await self._http.get(
            url,
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
        )
        response.raise_for_status()

        content_type = response.headers.get("content-type", "")
        body = response.text[: self.max_body_chars]
        if "html" in content_type or not content_type:
            # Parsing runs in a worker thread so the caller's deadline can still fire.
            text = await asyncio.to_thread(html_to_text, body)
        elif content_type.startswith("text/"):
            text = body.strip()
        else:
            raise ValueError(f"Unsupported content type {content_type!r} for {url}")
        return FetchedDocument(url=url, content=text)
