from __future__ import annotations

import asyncio
import json

import pytest

from hub_engine.config import Settings
from hub_engine.research_core.models.interfaces import FetchedDocument, SearchResult
from hub_engine.services.context_pipeline import ContextPipeline
from hub_engine.services.service_context import ServiceContext
from hub_engine.services.streaming import GENERATION_FAILED_MESSAGE


class FakeGeneration:
    def __init__(self, queries=None, *, raw: str | None = None, answer=("Answer ", "text."), fail_stream=False):
        self.raw = raw if raw is not None else json.dumps({"queries": queries or []})
        self.answer = answer
        self.fail_stream = fail_stream
        self.prompts: list[str] = []

    async def complete(self, prompt, *, model=None, json_mode=False):
        self.prompts.append(prompt)
        return self.raw

    async def stream(self, prompt, *, model=None):
        self.prompts.append(prompt)
        for chunk in self.answer:
            yield chunk
        if self.fail_stream:
            raise RuntimeError("generation backend unavailable")


class FakeSearch:
    name = "fake"

    def __init__(self, results: dict[str, list[str]], failures: set[str] | None = None):
        self.results = results
        self.failures = failures or set()
        self.queries: list[str] = []

    async def search(self, query, *, max_results=10):
        self.queries.append(query)
        if query in self.failures:
            raise RuntimeError("search provider down")
        return [SearchResult(url=u, title=u) for u in self.results.get(query, [])]


class FakeFetch:
    name = "fake"

    def __init__(self, delays: dict[str, float] | None = None):
        self.delays = delays or {}
        self.urls: list[str] = []

    async def fetch(self, url):
        self.urls.append(url)
        await asyncio.sleep(self.delays.get(url, 0.0))
        return FetchedDocument(url=url, content=f"[{url}]")


def make_services(generation, search, fetch, **overrides) -> ServiceContext:
    config = Settings(
        _env_file=None,
        link_denylist="instagram.com,youtube.com",
        fetch_deadline_ms=750,
        context_max_tokens_per_doc=1000,
        **overrides,
    )
    return ServiceContext(config=config, search=search, fetch=fetch, generation=generation)


@pytest.mark.asyncio
async def test_denylisted_result_is_filtered_out():
    search = FakeSearch(
        {"NCAA transfer portal rules": ["https://ncaa.org/transfer", "https://www.instagram.com/p/portal"]}
    )
    services = make_services(FakeGeneration(["NCAA transfer portal rules"]), search, FakeFetch())

    result = await ContextPipeline(services).build_context(["What are the transfer portal rules?"])

    assert result.candidate_links == ["https://ncaa.org/transfer"]
    assert result.context == "[https://ncaa.org/transfer]"


@pytest.mark.asyncio
async def test_slow_fetch_is_dropped_and_order_is_preserved():
    search = FakeSearch({"q": ["https://a.com", "https://slow.com", "https://c.com"]})
    fetch = FakeFetch(delays={"https://a.com": 0.05, "https://slow.com": 1.5})
    services = make_services(FakeGeneration(["q"]), search, fetch)

    result = await ContextPipeline(services).build_context(["question"])

    assert [d.url for d in result.documents] == ["https://a.com", "https://c.com"]
    assert result.context == "[https://a.com]\n[https://c.com]"
    assert fetch.urls.count("https://slow.com") == 1


@pytest.mark.asyncio
async def test_empty_query_derivation_short_circuits_to_empty_context():
    search = FakeSearch({})
    fetch = FakeFetch()
    services = make_services(FakeGeneration([]), search, fetch)

    result = await ContextPipeline(services).build_context(["hello there"])

    assert result.context == ""
    assert result.candidate_links == []
    assert search.queries == []
    assert fetch.urls == []


@pytest.mark.asyncio
async def test_malformed_query_derivation_short_circuits():
    search = FakeSearch({})
    services = make_services(FakeGeneration(raw="I cannot help with that."), search, FakeFetch())

    result = await ContextPipeline(services).build_context(["question"])

    assert result.queries == []
    assert search.queries == []
    assert result.context == ""


@pytest.mark.asyncio
async def test_derives_three_queries_but_searches_only_two():
    search = FakeSearch({"q1": ["https://1.com"], "q2": ["https://2.com"], "q3": ["https://3.com"]})
    services = make_services(FakeGeneration(["q1", "q2", "q3"]), search, FakeFetch())

    result = await ContextPipeline(services).build_context(["question"])

    assert result.queries == ["q1", "q2", "q3"]
    assert result.searched_queries == ["q1", "q2"]
    assert sorted(search.queries) == ["q1", "q2"]
    assert result.context == "[https://1.com]\n[https://2.com]"


@pytest.mark.asyncio
async def test_all_searches_failing_still_yields_empty_context():
    search = FakeSearch({"q1": ["https://1.com"]}, failures={"q1", "q2"})
    services = make_services(FakeGeneration(["q1", "q2"]), search, FakeFetch())

    result = await ContextPipeline(services).build_context(["question"])

    assert result.candidate_links == []
    assert result.context == ""


@pytest.mark.asyncio
async def test_chat_streams_context_then_answer_with_answer_prompt():
    generation = FakeGeneration(["q"])
    search = FakeSearch({"q": ["https://a.com"]})
    services = make_services(generation, search, FakeFetch())

    events = [e async for e in ContextPipeline(services).chat(["Who won?"])]

    assert [e.event.value for e in events] == [
        "context_ready",
        "answer_delta",
        "answer_delta",
        "answer_complete",
    ]
    assert events[0].data["sources"] == ["https://a.com"]
    assert events[-1].data["answer"] == "Answer text."
    answer_prompt = generation.prompts[-1]
    assert "<context>[https://a.com]</context>" in answer_prompt
    assert "<user_question>Who won?</user_question>" in answer_prompt


@pytest.mark.asyncio
async def test_chat_generation_failure_ends_with_single_error_event():
    generation = FakeGeneration(["q"], fail_stream=True)
    services = make_services(generation, FakeSearch({"q": []}), FakeFetch())

    events = [e async for e in ContextPipeline(services).chat(["Who won?"])]

    assert events[-1].event.value == "error"
    assert events[-1].data["message"] == GENERATION_FAILED_MESSAGE
    assert [e.event.value for e in events].count("error") == 1
    assert "answer_complete" not in [e.event.value for e in events]


@pytest.mark.asyncio
async def test_chat_rejects_blank_question():
    services = make_services(FakeGeneration([]), FakeSearch({}), FakeFetch())
    with pytest.raises(ValueError):
        async for _ in ContextPipeline(services).chat(["  "]):
            pass
