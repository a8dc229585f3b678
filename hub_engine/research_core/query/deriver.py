from __future__ import annotations

import json
import time
from datetime import date
from typing import Any, Sequence

from loguru import logger

from hub_engine.research_core.models.interfaces import GenerationProvider
from hub_engine.services.prompt_store import render_prompt


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        parts = text.split("```")
        text = parts[1] if len(parts) >= 2 else ""
        if text.startswith("json"):
            text = text[4:]
    return text.strip()


def parse_queries(raw_text: str, *, max_queries: int) -> list[str]:
    """Parse a JSON list of query strings from model output.

    Accepts a bare array, a fenced array, or an object with a ``queries`` key.
    Anything else raises ``ValueError``.
    """
    text = _strip_code_fence(raw_text or "")
    if not text:
        raise ValueError("empty query derivation output")

    try:
        parsed: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"query derivation output is not JSON: {exc}") from exc

    if isinstance(parsed, dict):
        parsed = parsed.get("queries")
    if not isinstance(parsed, list):
        raise ValueError("query derivation output is not a list")

    queries: list[str] = []
    for item in parsed:
        if not isinstance(item, str):
            continue
        cleaned = " ".join(item.split())
        if cleaned:
            queries.append(cleaned)
    return queries[: max(int(max_queries), 0)]


class QueryDeriver:
    """Turns the user side of a conversation into a few search queries."""

    def __init__(
        self,
        generation: GenerationProvider,
        *,
        max_queries: int = 3,
        model: str | None = None,
    ):
        self.generation = generation
        self.max_queries = max(int(max_queries), 1)
        self.model = model

    def build_prompt(self, user_messages: Sequence[str]) -> str:
        return render_prompt(
            "query_deriver.prompt",
            today_iso=date.today().isoformat(),
            messages="\n".join(f"- {m.strip()}" for m in user_messages if m.strip()),
            max_queries=self.max_queries,
        )

    async def derive(self, user_messages: Sequence[str]) -> list[str]:
        """Return up to ``max_queries`` queries, or ``[]`` on any failure."""
        if not any(m.strip() for m in user_messages):
            return []

        started = time.monotonic()
        try:
            raw = await self.generation.complete(
                self.build_prompt(user_messages),
                model=self.model,
                json_mode=True,
            )
        except Exception as exc:
            logger.warning(f"Query derivation call failed, continuing without search: {exc!r}")
            return []

        try:
            queries = parse_queries(raw, max_queries=self.max_queries)
        except ValueError as exc:
            logger.warning(f"Discarding malformed query derivation output: {exc}")
            return []

        logger.debug(
            f"Derived {len(queries)} queries in {int((time.monotonic() - started) * 1000)}ms: {queries}"
        )
        return queries
