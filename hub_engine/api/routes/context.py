from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from hub_engine.api.deps import get_services, require_user_texts
from hub_engine.models.schemas import ChatRequest, ContextDetailResponse, ContextResponse
from hub_engine.services import logger as log_service
from hub_engine.services.context_pipeline import ContextPipeline
from hub_engine.services.service_context import ServiceContext

router = APIRouter(tags=["context"])


@router.get("/context", response_model=ContextResponse)
async def get_context(
    user_question: str = Query(..., min_length=1),
    services: ServiceContext = Depends(get_services),
):
    """Single-question context lookup used by the chat front-end."""
    if not user_question.strip():
        raise HTTPException(status_code=400, detail="user_question must not be blank")

    result = await ContextPipeline(services).build_context([user_question])
    log_service.log_event(
        event_type="context_built",
        message="Context built for single question",
        sources=len(result.documents),
        elapsed_ms=result.elapsed_ms,
    )
    return ContextResponse(context=result.context)


@router.post("/api/context", response_model=ContextDetailResponse)
async def build_context(
    request: ChatRequest,
    services: ServiceContext = Depends(get_services),
):
    """Context lookup for a full conversation, with pipeline details."""
    texts = require_user_texts(request.messages)
    result = await ContextPipeline(services, model=request.model).build_context(texts)
    return ContextDetailResponse(**result.to_dict())
