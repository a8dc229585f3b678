from __future__ import annotations

import time
from typing import AsyncGenerator, Sequence

from loguru import logger

from hub_engine.llm_client import get_model, get_query_model
from hub_engine.models.events import SSEEvent
from hub_engine.research_core.context.assembler import assemble_context
from hub_engine.research_core.fetch.service import ContentFetcher
from hub_engine.research_core.filter.links import filter_links
from hub_engine.research_core.models.interfaces import ContextResult
from hub_engine.research_core.query.deriver import QueryDeriver
from hub_engine.research_core.search.fanout import run_searches
from hub_engine.services import logger as log_service
from hub_engine.services import streaming
from hub_engine.services.prompt_store import render_prompt
from hub_engine.services.service_context import ServiceContext


def _ms_since(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class ContextPipeline:
    """Retrieves web context for a conversation and streams the answer.

    Flow:
      1. Derive up to ``max_derived_queries`` search queries from user turns
      2. Search the first ``max_search_queries`` of them in parallel
      3. Drop denylisted and duplicate links
      4. Fetch every candidate in parallel, each under its own deadline
      5. Truncate and join the surviving documents into one context string

    Stages run one after another; each stage's tasks all settle before the
    next stage starts. Nothing is shared between runs.
    """

    def __init__(self, services: ServiceContext, *, model: str | None = None):
        self.services = services
        config = services.config
        self.model = model or get_model(config)
        self.max_search_queries = max(int(config.max_search_queries), 0)
        self.max_results_per_query = max(int(config.search_max_results_per_query), 1)
        self.denylist = config.link_denylist_terms
        self.max_tokens_per_doc = max(int(config.context_max_tokens_per_doc), 0)
        self.chars_per_token = max(int(config.chars_per_token), 1)
        self.deriver = QueryDeriver(
            services.generation,
            max_queries=config.max_derived_queries,
            model=get_query_model(config),
        )
        self.fetcher = ContentFetcher(services.fetch, deadline_ms=config.fetch_deadline_ms)

    async def build_context(self, user_messages: Sequence[str]) -> ContextResult:
        pipeline_started = time.monotonic()
        result = ContextResult()

        started = time.monotonic()
        result.queries = await self.deriver.derive(user_messages)
        log_service.log_pipeline_stage(
            "derive",
            inputs=len(user_messages),
            outputs=len(result.queries),
            duration_ms=_ms_since(started),
        )
        if not result.queries:
            result.elapsed_ms = _ms_since(pipeline_started)
            return result

        started = time.monotonic()
        fanout = await run_searches(
            self.services.search,
            result.queries,
            max_queries=self.max_search_queries,
            max_results=self.max_results_per_query,
        )
        result.searched_queries = fanout.queries
        urls = fanout.flattened_urls()
        log_service.log_pipeline_stage(
            "search",
            inputs=len(fanout.queries),
            outputs=len(fanout.results),
            duration_ms=_ms_since(started),
            results=len(urls),
        )

        result.candidate_links = filter_links(urls, self.denylist)
        log_service.log_pipeline_stage(
            "filter",
            inputs=len(urls),
            outputs=len(result.candidate_links),
            duration_ms=0,
        )

        started = time.monotonic()
        result.documents = await self.fetcher.fetch_all(result.candidate_links)
        log_service.log_pipeline_stage(
            "fetch",
            inputs=len(result.candidate_links),
            outputs=len(result.documents),
            duration_ms=_ms_since(started),
        )

        result.context = assemble_context(
            result.documents,
            max_tokens_per_doc=self.max_tokens_per_doc,
            chars_per_token=self.chars_per_token,
        )
        result.elapsed_ms = _ms_since(pipeline_started)
        return result

    def build_answer_prompt(self, context: str, question: str) -> str:
        return render_prompt("answer.prompt", context=context, question=question)

    async def chat(self, user_messages: Sequence[str]) -> AsyncGenerator[SSEEvent, None]:
        """Build context for the latest question, then stream the answer."""
        if not user_messages or not user_messages[-1].strip():
            raise ValueError("conversation has no user question")

        run_started = time.monotonic()
        question = user_messages[-1]
        result = await self.build_context(user_messages)
        yield streaming.context_ready(result)

        chunks: list[str] = []
        try:
            prompt = self.build_answer_prompt(result.context, question)
            async for chunk in self.services.generation.stream(prompt, model=self.model):
                chunks.append(chunk)
                yield streaming.answer_delta(chunk)
        except Exception as exc:
            logger.exception(f"Answer generation failed: {exc}")
            log_service.log_llm_call(
                model=self.model,
                caller="pipeline.answer",
                duration_ms=_ms_since(run_started),
                status="error",
                error=str(exc),
            )
            yield streaming.error()
            return

        yield streaming.answer_complete("".join(chunks), runtime_ms=_ms_since(run_started))
