from __future__ import annotations

from pydantic import BaseModel, Field

from hub_engine.models.conversation import ConversationTurn


# --- Requests ---


class ChatRequest(BaseModel):
    messages: list[ConversationTurn] = Field(min_length=1)
    model: str | None = None


# --- Responses ---


class ContextResponse(BaseModel):
    context: str


class ContextDetailResponse(BaseModel):
    queries: list[str]
    searched_queries: list[str]
    candidate_links: list[str]
    sources: list[str]
    context: str
    elapsed_ms: int


class ModelInfo(BaseModel):
    id: str
    name: str
    description: str


class ModelsResponse(BaseModel):
    models: list[ModelInfo]
