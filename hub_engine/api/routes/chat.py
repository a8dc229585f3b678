from __future__ import annotations

from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse

from hub_engine.api.deps import get_services, require_user_texts
from hub_engine.models.schemas import ChatRequest
from hub_engine.services import logger as log_service
from hub_engine.services.context_pipeline import ContextPipeline
from hub_engine.services.service_context import ServiceContext

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("")
async def chat(
    request: ChatRequest,
    services: ServiceContext = Depends(get_services),
):
    """SSE endpoint: one ``context_ready`` event, answer deltas, then completion.

    An ``error`` event ends the stream and replaces any partial answer.
    """
    texts = require_user_texts(request.messages)
    pipeline = ContextPipeline(services, model=request.model)

    async def event_generator():
        log_service.log_event(
            event_type="chat_started",
            message="Chat turn started",
            model=pipeline.model,
            question=texts[-1][:100],
            turns=len(request.messages),
        )
        async for event in pipeline.chat(texts):
            yield event.to_sse()

    return EventSourceResponse(event_generator())
