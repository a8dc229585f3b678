from __future__ import annotations

import asyncio
import time
from typing import Sequence

from loguru import logger

from hub_engine.research_core.models.interfaces import FetchedDocument, FetchProvider


class ContentFetcher:
    """Best-effort parallel page fetch with an individual deadline per link.

    Every link gets exactly one attempt guarded by its own ``asyncio.wait_for``.
    A slow or failing link is dropped without affecting its siblings, and the
    batch returns once every task has either finished or hit its deadline.
    """

    def __init__(self, provider: FetchProvider, *, deadline_ms: int = 750):
        self.provider = provider
        self.deadline_ms = max(int(deadline_ms), 1)

    @property
    def deadline_seconds(self) -> float:
        return self.deadline_ms / 1000.0

    async def fetch_one(self, url: str) -> FetchedDocument | None:
        started = time.monotonic()
        try:
            document = await asyncio.wait_for(
                self.provider.fetch(url),
                timeout=self.deadline_seconds,
            )
        except asyncio.TimeoutError:
            logger.debug(f"Fetch timed out after {self.deadline_ms}ms, dropping {url}")
            return None
        except Exception as exc:
            logger.debug(f"Fetch failed for {url}: {exc!r}")
            return None

        if document is None or not document.content:
            logger.debug(f"Fetch returned no content for {url}")
            return None
        logger.debug(
            f"Fetched {url} ({len(document.content)} chars) "
            f"in {int((time.monotonic() - started) * 1000)}ms"
        )
        return document

    async def fetch_all(self, urls: Sequence[str]) -> list[FetchedDocument]:
        if not urls:
            return []
        # Each task owns its slot in the gathered list; order follows ``urls``.
        results = await asyncio.gather(*(self.fetch_one(url) for url in urls))
        return [doc for doc in results if doc is not None]
