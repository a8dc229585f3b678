from __future__ import annotations

from typing import Any

from hub_engine.models.events import EventType, SSEEvent
from hub_engine.research_core.models.interfaces import ContextResult

GENERATION_FAILED_MESSAGE = "Sorry, an error occurred. Please try again later."


def context_ready(result: ContextResult) -> SSEEvent:
    return SSEEvent(
        event=EventType.CONTEXT_READY,
        data={
            "queries": result.searched_queries,
            "sources": [doc.url for doc in result.documents],
            "context_chars": len(result.context),
            "elapsed_ms": result.elapsed_ms,
        },
    )


def answer_delta(chunk: str) -> SSEEvent:
    return SSEEvent(event=EventType.ANSWER_DELTA, data={"chunk": chunk})


def answer_complete(answer: str, *, runtime_ms: int | None = None) -> SSEEvent:
    data: dict[str, Any] = {"answer": answer}
    if runtime_ms is not None:
        data["runtime_ms"] = runtime_ms
    return SSEEvent(event=EventType.ANSWER_COMPLETE, data=data)


def error(message: str = GENERATION_FAILED_MESSAGE) -> SSEEvent:
    return SSEEvent(event=EventType.ERROR, data={"message": message})
