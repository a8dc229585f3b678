from __future__ import annotations

from dataclasses import dataclass, field
from typing import AsyncIterator, Protocol


@dataclass(slots=True)
class SearchResult:
    url: str
    title: str = ""
    snippet: str = ""


@dataclass(slots=True)
class FetchedDocument:
    url: str
    content: str


@dataclass(slots=True)
class ContextResult:
    queries: list[str] = field(default_factory=list)
    searched_queries: list[str] = field(default_factory=list)
    candidate_links: list[str] = field(default_factory=list)
    documents: list[FetchedDocument] = field(default_factory=list)
    context: str = ""
    elapsed_ms: int = 0

    def to_dict(self) -> dict:
        return {
            "queries": self.queries,
            "searched_queries": self.searched_queries,
            "candidate_links": self.candidate_links,
            "sources": [doc.url for doc in self.documents],
            "context": self.context,
            "elapsed_ms": self.elapsed_ms,
        }


class SearchProvider(Protocol):
    name: str

    async def search(self, query: str, *, max_results: int = 10) -> list[SearchResult]:
        ...


class FetchProvider(Protocol):
    name: str

    async def fetch(self, url: str) -> FetchedDocument:
        ...


class GenerationProvider(Protocol):
    async def complete(
        self,
        prompt: str,
        *,
        model: str | None = None,
        json_mode: bool = False,
    ) -> str:
        ...

    def stream(self, prompt: str, *, model: str | None = None) -> AsyncIterator[str]:
        ...
