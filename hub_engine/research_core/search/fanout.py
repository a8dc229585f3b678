from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Sequence

from loguru import logger

from hub_engine.research_core.models.interfaces import SearchProvider, SearchResult


@dataclass(slots=True)
class FanoutResult:
    queries: list[str] = field(default_factory=list)
    results: list[list[SearchResult]] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    def flattened_urls(self) -> list[str]:
        """URLs in query order, then provider rank order within a query."""
        return [item.url for batch in self.results for item in batch if item.url]


async def run_searches(
    provider: SearchProvider,
    queries: Sequence[str],
    *,
    max_queries: int,
    max_results: int = 10,
) -> FanoutResult:
    """Search the first ``max_queries`` queries concurrently.

    All searches settle before returning. Failed searches contribute nothing.
    """
    selected = [q for q in queries if q and q.strip()][: max(int(max_queries), 0)]
    outcome = FanoutResult(queries=selected)
    if not selected:
        return outcome

    settled = await asyncio.gather(
        *(provider.search(query, max_results=max_results) for query in selected),
        return_exceptions=True,
    )

    for query, item in zip(selected, settled):
        if isinstance(item, BaseException):
            logger.warning(f"Search via {provider.name} failed for '{query}': {item!r}")
            outcome.failed.append(query)
            continue
        if not isinstance(item, (list, tuple)):
            logger.warning(
                f"Search via {provider.name} returned {type(item).__name__} for '{query}', expected a list"
            )
            outcome.failed.append(query)
            continue
        outcome.results.append(list(item))
    return outcome
